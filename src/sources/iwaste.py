"""EPA iWASTE metadata catalog source."""

from typing import Dict

from src.sources.base import DataSource, FetchOutcome, build_auth_headers


class IWasteSource(DataSource):
    name = "iwaste"

    def auth_headers(self) -> Dict[str, str]:
        return build_auth_headers(self.settings.iwaste_auth_header, self.settings.iwaste_api_key)

    async def fetch_catalog(self, resource: str) -> FetchOutcome:
        """Fetch one catalog resource: ``categories``, ``parameters``, or ``structure-types``."""

        return await self._get(resource, f"{self.settings.iwaste_base}/api/{resource}")

    async def fetch_categories(self) -> FetchOutcome:
        return await self.fetch_catalog("categories")

    async def fetch_parameters(self) -> FetchOutcome:
        return await self.fetch_catalog("parameters")

    async def fetch_structure_types(self) -> FetchOutcome:
        return await self.fetch_catalog("structure-types")
