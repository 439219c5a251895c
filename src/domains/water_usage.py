"""Global freshwater withdrawals from the World Bank."""

from dataclasses import dataclass
from typing import Any, Optional, Tuple
import asyncio

from src.config import config
from src.domains.base import InvocationToken, Orchestrator
from src.sources.worldbank import WorldBankSource
from src.transform.aggregate import rank_latest
from src.transform.fields import WORLDBANK_OBSERVATIONS, WORLDBANK_SERIES
from src.transform.mock import MockKind, mock_series, mock_top_entities
from src.transform.records import RankedEntity, TimePoint


@dataclass(frozen=True)
class WaterUsagePayload:
    world_series: Tuple[TimePoint, ...] = ()
    top_countries: Tuple[RankedEntity, ...] = ()


class WaterUsageOrchestrator(Orchestrator):
    """World history series plus a top-N ranking of each country's latest year.

    Both queries go out together. The domain counts as live when either of
    them yields records.
    """

    name = "water_usage"

    def __init__(self, client, settings: Optional[config.Settings] = None) -> None:
        super().__init__(client, settings)
        self.source = WorldBankSource(client, self.settings)

    def empty_payload(self) -> WaterUsagePayload:
        return WaterUsagePayload()

    def mock_payload(self, top_n: int = config.TOP_N, **params: Any) -> WaterUsagePayload:
        return WaterUsagePayload(
            world_series=tuple(mock_series(MockKind.WATER_WITHDRAWAL, config.MOCK_WITHDRAWAL_LENGTH)),
            top_countries=tuple(mock_top_entities(top_n)),
        )

    async def load(
        self,
        token: InvocationToken,
        indicator: str = config.WATER_INDICATOR,
        top_n: int = config.TOP_N,
    ) -> Optional[WaterUsagePayload]:
        world_outcome, all_outcome = await asyncio.gather(
            self.source.fetch_indicator(config.WATER_WORLD_ENTITY, indicator, config.WATER_WORLD_DATES),
            self.source.fetch_indicator("all", indicator, config.WATER_RANKING_DATES),
        )
        world_series = self.records(token, world_outcome, WORLDBANK_SERIES)
        ranking = rank_latest(self.records(token, all_outcome, WORLDBANK_OBSERVATIONS), top_n)
        if not world_series and not ranking:
            return None
        return WaterUsagePayload(world_series=tuple(world_series), top_countries=tuple(ranking))
