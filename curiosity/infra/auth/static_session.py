from __future__ import annotations

from typing import Optional

from curiosity.domain.common.models import Session
from curiosity.domain.common.ports import SessionProvider


class StaticSessionProvider(SessionProvider):
    """
    Session fixed at construction time.

    The Telegram DI middleware builds one per update from the sender, tests
    build one per fake user. None means signed out.
    """

    def __init__(self, session: Optional[Session]) -> None:
        self._session = session

    async def get_session(self) -> Optional[Session]:
        return self._session

    def sign_out(self) -> None:
        self._session = None
