"""Progress reporting protocols shared by pipeline components."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol

from fillergym.models.run import ProgressEvent


class ProgressReporter(Protocol):
    async def report(self, done: int, total: int, message: str) -> None: ...


ProgressHook = Callable[[ProgressEvent], Awaitable[None]]
