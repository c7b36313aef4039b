from __future__ import annotations

from typing import Protocol, Sequence

from .model import CashLogEntry


class CashLogRepository(Protocol):
    def add(self, entry: CashLogEntry) -> int:
        raise NotImplementedError

    def recent(self, limit: int) -> Sequence[CashLogEntry]:
        """Newest entries first."""

        raise NotImplementedError
