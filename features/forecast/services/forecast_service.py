import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from features.forecast.models.forecast_types import ForecastSnapshot
from features.forecast.services.windfinder_client import WindfinderClient
from features.forecast.services.forecast_extractor import ForecastExtractor
from features.forecast.services.forecast_normalizer import ForecastNormalizer
from features.forecast.services.wind_status import get_wind_status_policy
from core.config import settings

logger = logging.getLogger(__name__)

class ForecastService:
    """Runs one scrape: fetch, extract and normalize into a snapshot."""

    def __init__(
        self,
        client: WindfinderClient,
        extractor: Optional[ForecastExtractor] = None,
        normalizer: Optional[ForecastNormalizer] = None,
        url: Optional[str] = None
    ):
        self.client = client
        self.extractor = extractor or ForecastExtractor()
        self.normalizer = normalizer or ForecastNormalizer(
            status_policy=get_wind_status_policy(settings.wind_status_policy)
        )
        self.url = url or settings.forecast_url

    def build_snapshot(self, document_text: str) -> ForecastSnapshot:
        """Turn a fetched page into a snapshot. CPU bound."""
        bundle = self.extractor.extract(document_text)
        observations = self.normalizer.normalize(bundle)
        return ForecastSnapshot(
            spot_name=bundle.spot_name,
            source_url=self.url,
            fetched_at=datetime.now(timezone.utc),
            observations=observations
        )

    async def scrape(self) -> ForecastSnapshot:
        """Fetch the spot page and build a snapshot from it.

        Parsing runs in the default executor so the event loop keeps serving
        queries meanwhile.
        """
        logger.info(f"🌊 Fetching forecast page {self.url}")
        document_text = await self.client.fetch(self.url)

        loop = asyncio.get_running_loop()
        snapshot = await loop.run_in_executor(None, self.build_snapshot, document_text)
        logger.info(f"✅ Scraped {len(snapshot.observations)} forecast slots for {snapshot.spot_name}")
        return snapshot
