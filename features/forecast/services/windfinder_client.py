import asyncio
import logging
import aiohttp
from typing import Optional, Dict

from features.common.exceptions.scrape_exceptions import TransportError
from core.config import settings

logger = logging.getLogger(__name__)

class WindfinderClient:
    """Fetches raw forecast pages from Windfinder."""

    def __init__(self, timeout: Optional[float] = None, headers: Optional[Dict[str, str]] = None):
        self.timeout = aiohttp.ClientTimeout(total=settings.request["timeout"] if timeout is None else timeout)
        self.headers = headers or {"User-Agent": settings.request["user_agent"]}
        self._session: Optional[aiohttp.ClientSession] = None

    async def _init_session(self) -> aiohttp.ClientSession:
        if not self._session or self._session.closed:
            self._session = aiohttp.ClientSession(headers=self.headers, timeout=self.timeout)
        return self._session

    async def close(self):
        if self._session:
            await self._session.close()
            self._session = None

    async def fetch(self, url: str) -> str:
        """Get the document text for a forecast page."""
        try:
            session = await self._init_session()
            async with session.get(url) as response:
                response.raise_for_status()
                text = await response.text()
                logger.debug(f"Fetched {len(text)} characters from {url}")
                return text

        except aiohttp.ClientResponseError as e:
            logger.error(f"❌ Forecast page {url} returned HTTP {e.status}")
            raise TransportError(f"HTTP {e.status} fetching {url}") from e
        except asyncio.TimeoutError as e:
            logger.error(f"❌ Timed out fetching forecast page {url}")
            raise TransportError(f"Timed out fetching {url}") from e
        except aiohttp.ClientError as e:
            logger.error(f"❌ Error fetching forecast page {url}: {str(e)}")
            raise TransportError(f"Error fetching {url}: {str(e)}") from e
