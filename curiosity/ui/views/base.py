from __future__ import annotations

import logging
from typing import Any, Optional

from curiosity.domain.common.errors import DomainError

logger = logging.getLogger(__name__)


class View:
    """
    Local-state view with a mount/unmount lifecycle.

    Subclasses implement _load() (fetch) and _apply() (store), and attach or
    release their listeners in _on_mount()/_on_unmount(). A load that finishes
    after unmount is dropped.
    """

    error_message = "Unable to load data. Please try again."

    def __init__(self) -> None:
        self.is_loading = False
        self.error: Optional[str] = None
        self._mounted = False
        # bumped per reload; only the newest load may touch state
        self._generation = 0

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    async def mount(self) -> None:
        if self._mounted:
            return
        self._mounted = True
        self._on_mount()
        await self.reload()

    def unmount(self) -> None:
        if not self._mounted:
            return
        self._mounted = False
        self._on_unmount()

    async def reload(self) -> None:
        """Full load; also the manual retry after an error. Older overlapping loads are dropped."""
        self._generation += 1
        generation = self._generation
        self.is_loading = True
        self.error = None
        try:
            result = await self._load()
        except DomainError as e:
            logger.error("%s failed to load: %s", type(self).__name__, e)
            if self._is_current(generation) and self._mounted:
                self.error = self.error_message
            return
        finally:
            if self._is_current(generation):
                self.is_loading = False
        if self._is_current(generation) and self._mounted:
            self._apply(result)

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _on_mount(self) -> None:
        pass

    def _on_unmount(self) -> None:
        pass

    async def _load(self) -> Any:
        raise NotImplementedError

    def _apply(self, result: Any) -> None:
        raise NotImplementedError
