"""Orchestration layer tying sources, transforms, and domains together."""

import asyncio
from typing import Any, Callable, Dict, List, Optional
import logging

from src.config import config
from src.domains.base import DomainResult, Listener, Orchestrator
from src.domains.carbon import CarbonOrchestrator
from src.domains.river_discharge import RiverDischargeOrchestrator
from src.domains.waste import WasteOrchestrator
from src.domains.water_usage import WaterUsageOrchestrator
from src.sources.base import ProviderClient

logger = logging.getLogger(__name__)


class DashboardService:
    """Central coordinator used by the dashboard front end.

    Every domain runs as its own task on mount and publishes independently; a
    slow or broken provider never holds up the others. Consumers either
    subscribe to ``DomainResult`` snapshots or read ``snapshot()``.
    """

    def __init__(
        self,
        settings: Optional[config.Settings] = None,
        client: Optional[ProviderClient] = None,
    ) -> None:
        self.settings = settings or config.Settings.from_env()
        self.client = client or ProviderClient(self.settings)
        self.domains: Dict[str, Orchestrator] = {
            orchestrator.name: orchestrator
            for orchestrator in (
                WaterUsageOrchestrator(self.client, self.settings),
                RiverDischargeOrchestrator(self.client, self.settings),
                CarbonOrchestrator(self.client, self.settings),
                WasteOrchestrator(self.client, self.settings),
            )
        }
        self._tasks: List[asyncio.Task] = []
        self._status_callback: Optional[Callable[[str], None]] = None
        for orchestrator in self.domains.values():
            orchestrator.subscribe(self._on_result)

    def set_status_callback(self, callback: Callable[[str], None]) -> None:
        """Register a UI-friendly callback for status updates."""

        self._status_callback = callback

    def _notify(self, message: str) -> None:
        """Send a message to the UI layer and log it for debugging."""

        logger.info(message)
        if self._status_callback:
            self._status_callback(message)

    def _on_result(self, domain: str, result: DomainResult) -> None:
        if result.status.terminal:
            self._notify(f"{domain}: {result.status.value}")
        else:
            logger.debug("%s: %s", domain, result.status.value)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Receive every domain's snapshots; returns an unsubscribe callable."""

        removers = [orchestrator.subscribe(listener) for orchestrator in self.domains.values()]

        def unsubscribe() -> None:
            for remove in removers:
                remove()

        return unsubscribe

    def mount(self, **overrides: Dict[str, Any]) -> List[asyncio.Task]:
        """Start every domain concurrently; must be called inside a running loop.

        ``overrides`` maps a domain name to the keyword parameters of its run,
        e.g. ``river_discharge={"site": "01578310"}``.
        """

        self._notify("Running data fetch...")
        self._tasks = [
            asyncio.create_task(orchestrator.run(**overrides.get(name, {})), name=f"domain-{name}")
            for name, orchestrator in self.domains.items()
        ]
        return self._tasks

    async def refresh_all(self, **overrides: Dict[str, Any]) -> Dict[str, DomainResult]:
        """Mount every domain and wait until each has settled."""

        tasks = self.mount(**overrides)
        await asyncio.gather(*tasks)
        self._notify("Fetch complete")
        return self.snapshot()

    async def refresh(self, domain: str, **params) -> DomainResult:
        """Re-run one domain, superseding its in-flight invocation if any."""

        return await self.domains[domain].run(**params)

    def unmount(self) -> None:
        """Stop publishing: in-flight requests finish but their results are dropped."""

        for orchestrator in self.domains.values():
            orchestrator.cancel()
        self._notify("Dashboard unmounted")

    def snapshot(self) -> Dict[str, DomainResult]:
        return {name: orchestrator.result for name, orchestrator in self.domains.items()}

    def diagnostics(self) -> Dict[str, Optional[str]]:
        return {name: orchestrator.diagnostic for name, orchestrator in self.domains.items()}

    async def aclose(self) -> None:
        await self.client.aclose()
