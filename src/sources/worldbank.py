"""World Bank indicator API source."""

from typing import Tuple
import logging

from src.config import config
from src.sources.base import DataSource, FetchOutcome

logger = logging.getLogger(__name__)


class WorldBankSource(DataSource):
    """Download annual indicator values for one entity code (or ``all``)."""

    name = "worldbank"

    def indicator_url(self, entity: str, indicator: str) -> str:
        return f"{self.settings.worldbank_base}/country/{entity}/indicator/{indicator}"

    async def fetch_indicator(
        self, entity: str, indicator: str, dates: Tuple[int, int]
    ) -> FetchOutcome:
        """Fetch every page-able row of ``indicator`` for ``entity`` in one request."""

        logger.info("Fetching World Bank indicator %s for %s (%s-%s)", indicator, entity, *dates)
        params = {
            "date": f"{dates[0]}:{dates[1]}",
            "format": "json",
            "per_page": config.WB_PER_PAGE,
        }
        return await self._get(f"{indicator}-{entity}", self.indicator_url(entity, indicator), params)
