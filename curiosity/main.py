from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from aiogram import Bot, Dispatcher
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import ExceptionTypeFilter
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import ErrorEvent

from curiosity.config import load_settings
from curiosity.domain.common.time import to_iso
from curiosity.domain.events.bus import NotificationBus
from curiosity.infra.backend.sqlite_backend import SqliteBackend
from curiosity.infra.clock.system_clock import SystemClock
from curiosity.infra.db.connection import Database
from curiosity.infra.db.schema_version import apply_migrations
from curiosity.infra.ids.uuid_gen import UuidGenerator
from curiosity.infra.realtime.hub import RealtimeHub
from curiosity.ui.telegram.handlers.calendar import router as calendar_router
from curiosity.ui.telegram.handlers.cancel import router as cancel_router
from curiosity.ui.telegram.handlers.focus import router as focus_router
from curiosity.ui.telegram.handlers.start import router as start_router
from curiosity.ui.telegram.handlers.stats import router as stats_router
from curiosity.ui.telegram.handlers.tasks import router as tasks_router
from curiosity.ui.telegram.middlewares.auth import OwnerOnlyMiddleware
from curiosity.ui.telegram.middlewares.di import DIMiddleware

REPO_ROOT = Path(__file__).resolve().parents[1]  # .../curiosity/main.py -> repo root


async def main() -> None:
    """
    Composition root: settings, database, backend, hub and bus, then polling.

    Only run ONE polling instance per bot token; a second one fails with
    TelegramConflictError ("terminated by other getUpdates request").
    """
    pid = os.getpid()
    settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - [PID:%(process)d] - %(message)s",
    )
    logger = logging.getLogger(__name__)
    logger.info("Bot starting - PID: %s", pid)

    # --- DB path: always absolute, ensure dir exists ---
    db_path = settings.db_path
    if not db_path.is_absolute():
        db_path = REPO_ROOT / db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("DB_PATH: %s", db_path)

    db = Database(str(db_path))
    clock = SystemClock(settings.timezone)
    ids = UuidGenerator()

    applied = await apply_migrations(db, now_iso=to_iso(clock.now()))
    if applied:
        logger.info("Applied migrations: %s", applied)

    hub = RealtimeHub()
    backend = SqliteBackend(db, clock, ids, hub=hub)
    bus = NotificationBus()

    bot = Bot(token=settings.bot_token)
    dp = Dispatcher(storage=MemoryStorage())

    # --- middlewares ---
    dp.message.middleware(OwnerOnlyMiddleware(settings.owner_telegram_id))
    dp.callback_query.middleware(OwnerOnlyMiddleware(settings.owner_telegram_id))

    dp.message.middleware(DIMiddleware(backend, clock, ids, hub, bus))
    dp.callback_query.middleware(DIMiddleware(backend, clock, ids, hub, bus))

    # --- routers ---
    dp.include_router(start_router)
    dp.include_router(cancel_router)
    dp.include_router(tasks_router)
    dp.include_router(focus_router)
    dp.include_router(stats_router)
    dp.include_router(calendar_router)

    @dp.error(ExceptionTypeFilter(TelegramBadRequest))
    async def handle_old_callback_query(event: ErrorEvent) -> None:
        """Ignore TelegramBadRequest for old/invalid callback queries (e.g. after bot restart)."""
        msg = str(event.exception).lower()
        if "query is too old" in msg or "query id is invalid" in msg or "message is not modified" in msg:
            logger.debug("Ignoring stale callback query: %s", event.exception)
            return
        raise event.exception

    logger.info("Starting polling - PID: %s", pid)
    try:
        await dp.start_polling(bot)
    finally:
        await hub.drain()
        await bot.session.close()
        logger.info("Bot shutdown complete - PID: %s", pid)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
