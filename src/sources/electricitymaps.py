"""Electricity Maps carbon-intensity and power-breakdown source."""

from typing import Any, Dict

from src.sources.base import DataSource, FetchOutcome, build_auth_headers


class ElectricityMapsSource(DataSource):
    """History/latest endpoint pairs for grid carbon intensity and power mix.

    Every request is scoped by the configured zone. When a key is configured it
    travels as a ``token`` query parameter and as a header, both under the
    configured header name and under ``auth-token``, which the v3 API expects.
    """

    name = "electricitymaps"

    def auth_headers(self) -> Dict[str, str]:
        headers = build_auth_headers(self.settings.carbon_auth_header, self.settings.carbon_api_key)
        if headers:
            headers.setdefault("auth-token", self.settings.carbon_api_key)
        return headers

    def query(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.settings.carbon_zone:
            params["zone"] = self.settings.carbon_zone
        if self.settings.carbon_api_key:
            params["token"] = self.settings.carbon_api_key
        return params

    async def _v3(self, resource: str, variant: str) -> FetchOutcome:
        url = f"{self.settings.carbon_base}/v3/{resource}/{variant}"
        return await self._get(f"{resource}-{variant}", url, self.query())

    async def fetch_intensity_history(self) -> FetchOutcome:
        return await self._v3("carbon-intensity", "history")

    async def fetch_intensity_latest(self) -> FetchOutcome:
        return await self._v3("carbon-intensity", "latest")

    async def fetch_breakdown_latest(self) -> FetchOutcome:
        return await self._v3("power-breakdown", "latest")

    async def fetch_breakdown_history(self) -> FetchOutcome:
        return await self._v3("power-breakdown", "history")
