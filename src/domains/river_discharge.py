"""River discharge readings from a USGS monitoring site."""

from typing import Any, Optional, Sequence, Tuple

from src.config import config
from src.domains.base import InvocationToken, Orchestrator
from src.sources.usgs import UsgsSource
from src.transform.fields import USGS_INSTANTANEOUS
from src.transform.mock import MockKind, mock_series
from src.transform.records import TimePoint


class RiverDischargeOrchestrator(Orchestrator):
    """Instantaneous series for one site.

    ``site``, ``parameter_codes``, and ``period`` are invocation parameters, so
    switching sites is simply another ``run``; the previous one is superseded.
    """

    name = "river_discharge"

    def __init__(self, client, settings: Optional[config.Settings] = None) -> None:
        super().__init__(client, settings)
        self.source = UsgsSource(client, self.settings)

    def empty_payload(self) -> Tuple[TimePoint, ...]:
        return ()

    def mock_payload(self, **params: Any) -> Tuple[TimePoint, ...]:
        return tuple(mock_series(MockKind.DISCHARGE, config.MOCK_DISCHARGE_LENGTH))

    async def load(
        self,
        token: InvocationToken,
        site: Optional[str] = None,
        parameter_codes: Sequence[str] = config.USGS_PARAMETER_CODES,
        period: str = config.USGS_PERIOD,
    ) -> Optional[Tuple[TimePoint, ...]]:
        outcome = await self.source.fetch_instantaneous(
            site or self.settings.usgs_site_id, parameter_codes, period
        )
        series = self.records(token, outcome, USGS_INSTANTANEOUS)
        return tuple(series) or None
