from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from curiosity.domain.common.models import Session
from curiosity.domain.common.query import Query

Row = Dict[str, Any]


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime: ...


class IdGenerator(ABC):
    @abstractmethod
    def new_id(self) -> str: ...


class SessionProvider(ABC):
    @abstractmethod
    async def get_session(self) -> Optional[Session]: ...


class Backend(ABC):
    """
    Table-oriented remote data backend.

    Failures surface as BackendError; single-row requests that match nothing
    raise NotFoundError.
    """

    @abstractmethod
    async def select(self, query: Query) -> List[Row]: ...

    @abstractmethod
    async def select_single(self, query: Query) -> Row: ...

    @abstractmethod
    async def insert(self, table: str, row: Mapping[str, Any]) -> Row: ...

    @abstractmethod
    async def update(self, query: Query, values: Mapping[str, Any]) -> List[Row]: ...

    @abstractmethod
    async def update_single(self, query: Query, values: Mapping[str, Any]) -> Row: ...

    @abstractmethod
    async def delete(self, query: Query) -> int: ...

    @abstractmethod
    async def upsert(self, table: str, row: Mapping[str, Any], on_conflict: str = "id") -> Row: ...

    @abstractmethod
    async def rpc(self, name: str, params: Mapping[str, Any]) -> List[Row]: ...
