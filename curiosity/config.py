from dataclasses import dataclass
import os
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    bot_token: str
    owner_telegram_id: int
    timezone: str
    db_path: Path
    log_level: str = "INFO"


def load_settings() -> Settings:
    load_dotenv()

    bot_token = os.getenv("BOT_TOKEN", "").strip()
    owner_raw = os.getenv("OWNER_TELEGRAM_ID", "0").strip() or "0"
    tz = os.getenv("TZ", "Europe/Helsinki").strip()
    db_raw = os.getenv("DB_PATH", "data/curiosity.db").strip()
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

    if not bot_token:
        raise RuntimeError("BOT_TOKEN missing in .env")
    try:
        owner_id = int(owner_raw)
    except ValueError:
        raise RuntimeError("OWNER_TELEGRAM_ID missing/invalid in .env") from None
    if owner_id <= 0:
        raise RuntimeError("OWNER_TELEGRAM_ID missing/invalid in .env")

    # db_path may still be relative; main resolves it against the repo root
    return Settings(
        bot_token=bot_token,
        owner_telegram_id=owner_id,
        timezone=tz,
        db_path=Path(db_raw),
        log_level=log_level,
    )
