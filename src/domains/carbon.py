"""Grid carbon intensity and power mix from Electricity Maps."""

from dataclasses import dataclass
from typing import Any, Optional, Tuple
import asyncio

from src.config import config
from src.domains.base import InvocationToken, Orchestrator
from src.sources.electricitymaps import ElectricityMapsSource
from src.transform.fields import (
    CARBON_INTENSITY_HISTORY,
    CARBON_INTENSITY_LATEST,
    POWER_BREAKDOWN_HISTORY,
    POWER_BREAKDOWN_LATEST,
)
from src.transform.mock import MockKind, mock_power_breakdown, mock_series
from src.transform.records import CategoryTally, TimePoint


@dataclass(frozen=True)
class CarbonPayload:
    intensity: Tuple[TimePoint, ...] = ()
    breakdown: Tuple[CategoryTally, ...] = ()


class CarbonOrchestrator(Orchestrator):
    """Two independent fallback chains, run side by side.

    Intensity prefers the history endpoint and falls back to the single latest
    reading; the power mix prefers the latest breakdown and falls back to the
    last entry of the breakdown history.
    """

    name = "carbon"

    def __init__(self, client, settings: Optional[config.Settings] = None) -> None:
        super().__init__(client, settings)
        self.source = ElectricityMapsSource(client, self.settings)

    def empty_payload(self) -> CarbonPayload:
        return CarbonPayload()

    def mock_payload(self, **params: Any) -> CarbonPayload:
        return CarbonPayload(
            intensity=tuple(mock_series(MockKind.CARBON_INTENSITY, config.MOCK_INTENSITY_LENGTH)),
            breakdown=tuple(mock_power_breakdown()),
        )

    async def load(self, token: InvocationToken, **params: Any) -> Optional[CarbonPayload]:
        intensity, breakdown = await asyncio.gather(
            self.first_usable(
                token,
                [
                    (self.source.fetch_intensity_history, CARBON_INTENSITY_HISTORY),
                    (self.source.fetch_intensity_latest, CARBON_INTENSITY_LATEST),
                ],
            ),
            self.first_usable(
                token,
                [
                    (self.source.fetch_breakdown_latest, POWER_BREAKDOWN_LATEST),
                    (self.source.fetch_breakdown_history, POWER_BREAKDOWN_HISTORY),
                ],
            ),
        )
        if not intensity and not breakdown:
            return None
        return CarbonPayload(intensity=tuple(intensity), breakdown=tuple(breakdown))
