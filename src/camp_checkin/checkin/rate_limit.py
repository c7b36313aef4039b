from __future__ import annotations

import threading
from datetime import datetime

from ..core.constants import DEFAULT_SCAN_MIN_INTERVAL_SECONDS
from ..core.exceptions import ScanRateLimitedError


class ScanRateLimiter:
    """In-process debounce: one scan per station per interval."""

    def __init__(self, min_interval_seconds: float = DEFAULT_SCAN_MIN_INTERVAL_SECONDS):
        self._min_interval = max(float(min_interval_seconds), 0.0)
        self._last_scan: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def check(self, station_id: str, now: datetime) -> None:
        if self._min_interval <= 0:
            return

        with self._lock:
            last = self._last_scan.get(station_id)
            if last is not None and (now - last).total_seconds() < self._min_interval:
                raise ScanRateLimitedError("Espera un momento antes de escanear de nuevo")
            self._last_scan[station_id] = now
