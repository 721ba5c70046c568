"""Atomic unit for writes that span more than one document.

Standalone MongoDB has no multi-document transactions, so every write that
must be undone when a later step fails registers a compensation. When the
``async with`` block raises (including cancellation), compensations run
newest first and the original exception propagates unchanged.

Usage::

    async with UnitOfWork("start_stream") as uow:
        await claim_channel(...)
        uow.on_rollback("release channel", release_channel)
        await stream.insert()
"""

from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import Any

from loguru import logger

Compensation = Callable[[], Awaitable[Any]]


class UnitOfWork:
    def __init__(self, name: str):
        self.name = name
        self.committed = False
        self.rolled_back = False
        self._compensations: list[tuple[str, Compensation]] = []

    def on_rollback(self, description: str, compensation: Compensation) -> None:
        """Register an undo step for the write that just succeeded."""
        self._compensations.append((description, compensation))

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc_type is None:
            self.committed = True
            self._compensations.clear()
            return False

        await self._rollback(exc_type, exc)
        return False

    async def _rollback(self, exc_type: type[BaseException], exc: BaseException | None) -> None:
        logger.warning(
            f"Rolling back {self.name} ({len(self._compensations)} step(s)) "
            f"after {exc_type.__name__}: {exc}"
        )

        while self._compensations:
            description, compensation = self._compensations.pop()
            try:
                await compensation()
                logger.debug(f"{self.name}: compensated '{description}'")
            except Exception as e:
                # The original error still propagates; this one only gets logged.
                logger.error(f"{self.name}: compensation '{description}' failed: {e!r}")

        self.rolled_back = True
