import logging
import threading
from datetime import datetime, timedelta
from typing import Optional

from features.forecast.models.forecast_types import (
    ForecastLookup,
    ForecastSnapshot,
    LookupStatus,
    Observation
)
from core.config import settings

logger = logging.getLogger(__name__)

class ForecastStore:
    """Holds the current forecast snapshot and answers point-in-time queries.

    Snapshots are immutable and swapped whole, so the lock is only held for
    the instant it takes to read or replace the reference. Readers always see
    one complete scrape.
    """

    def __init__(self, window: Optional[timedelta] = None):
        self.window = timedelta(hours=settings.query_window_hours) if window is None else window
        self._snapshot: Optional[ForecastSnapshot] = None
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> Optional[ForecastSnapshot]:
        with self._lock:
            return self._snapshot

    @property
    def is_populated(self) -> bool:
        return self.snapshot is not None

    def replace(self, snapshot: ForecastSnapshot) -> None:
        """Swap in a freshly built snapshot."""
        with self._lock:
            self._snapshot = snapshot
        logger.info(
            f"📦 Stored forecast for {snapshot.spot_name} with {len(snapshot.observations)} slots"
        )

    def lookup(self, query_time: datetime) -> ForecastLookup:
        """Find the next slot within the window after ``query_time``.

        Falls back to the earliest slot when nothing lands in the window.
        """
        if query_time.tzinfo is None:
            raise ValueError("query_time must be timezone-aware")

        snapshot = self.snapshot
        if snapshot is None:
            return ForecastLookup(status=LookupStatus.NOT_READY, query_time=query_time)
        if not snapshot.observations:
            return ForecastLookup(status=LookupStatus.EMPTY, query_time=query_time)

        window_end = query_time + self.window
        for observation in snapshot.observations:
            if query_time < observation.timestamp <= window_end:
                return ForecastLookup(
                    status=LookupStatus.MATCH,
                    query_time=query_time,
                    observation=observation
                )

        return ForecastLookup(
            status=LookupStatus.FALLBACK,
            query_time=query_time,
            observation=snapshot.observations[0]
        )

    def for_time(self, query_time: datetime) -> Optional[Observation]:
        return self.lookup(query_time).observation
