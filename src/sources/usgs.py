"""USGS National Water Information System instantaneous-values source."""

from typing import Dict, Sequence

from src.sources.base import DataSource, FetchOutcome, build_auth_headers


class UsgsSource(DataSource):
    name = "usgs"

    def auth_headers(self) -> Dict[str, str]:
        return build_auth_headers(self.settings.usgs_auth_header, self.settings.usgs_api_key)

    async def fetch_instantaneous(
        self, site: str, parameter_codes: Sequence[str], period: str
    ) -> FetchOutcome:
        params = {
            "format": "json",
            "sites": site,
            "period": period,
            "parameterCd": ",".join(parameter_codes),
        }
        return await self._get(f"iv-{site}", f"{self.settings.usgs_base}/iv/", params)
