import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from features.forecast.services.forecast_service import ForecastService
from features.forecast.services.forecast_store import ForecastStore
from features.common.exceptions.scrape_exceptions import ScrapeError
from core.config import settings

logger = logging.getLogger(__name__)

JOB_ID = "forecast_refresh"

class ForecastRefresher:
    """Keeps the forecast store fresh by re-scraping on a fixed interval.

    A failed scrape is logged and leaves the current snapshot in place. The
    next attempt is simply the next tick.
    """

    def __init__(
        self,
        service: ForecastService,
        store: ForecastStore,
        interval_seconds: Optional[int] = None
    ):
        self.service = service
        self.store = store
        self.interval_seconds = settings.refresh_interval_seconds if interval_seconds is None else interval_seconds
        self.scheduler = AsyncIOScheduler(timezone=timezone.utc)
        self.last_success: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self._refresh_lock = asyncio.Lock()
        self._started = False

    def start(self, run_immediately: bool = True) -> None:
        """Schedule the refresh job. Must be called from a running event loop."""
        if self._started:
            return

        job_options = {}
        if run_immediately:
            # Passing next_run_time=None would add the job paused, so only set it here
            job_options["next_run_time"] = datetime.now(timezone.utc)

        self.scheduler.add_job(
            self.refresh,
            IntervalTrigger(seconds=self.interval_seconds, timezone=timezone.utc),
            id=JOB_ID,
            name="forecast_refresh",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
            **job_options
        )
        self.scheduler.start()
        self._started = True
        logger.info(f"⏰ Forecast refresh scheduled every {self.interval_seconds}s")

    async def stop(self) -> None:
        """Cancel the schedule. Safe to call more than once."""
        if not self._started:
            return
        self._started = False

        # shutdown is queued on the event loop, drop the job now so no tick slips in
        if self.scheduler.get_job(JOB_ID):
            self.scheduler.remove_job(JOB_ID)
        self.scheduler.shutdown(wait=False)
        await asyncio.sleep(0)
        logger.info("Forecast refresh scheduler stopped")

    def next_run_time(self) -> Optional[datetime]:
        job = self.scheduler.get_job(JOB_ID)
        if job and job.next_run_time:
            return job.next_run_time
        return None

    async def trigger_now(self) -> bool:
        """Refresh immediately, outside the schedule."""
        return await self.refresh()

    async def refresh(self) -> bool:
        """Scrape once and swap the result into the store.

        Returns whether the store was replaced.
        """
        async with self._refresh_lock:
            try:
                snapshot = await self.service.scrape()
            except ScrapeError as e:
                self.last_error = f"{type(e).__name__}: {str(e)}"
                logger.error(f"❌ Forecast refresh failed, keeping previous snapshot: {self.last_error}")
                return False
            except Exception as e:
                self.last_error = f"{type(e).__name__}: {str(e)}"
                logger.exception(f"❌ Unexpected error refreshing forecast, keeping previous snapshot: {str(e)}")
                return False

            self.store.replace(snapshot)
            self.last_success = snapshot.fetched_at
            self.last_error = None
            return True
