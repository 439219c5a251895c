"""Entry point for the EcoPulse data layer.

Runs one refresh of every dashboard domain and logs what each one settled on.
Keeping the top-level script tiny makes it easy to debug start-up issues
(missing dependencies, unreachable providers) without a front end attached.
"""

import asyncio
import logging
import os

from src.app_service import DashboardService
from src.domains.base import DomainStatus

logger = logging.getLogger(__name__)


async def run_once() -> None:
    service = DashboardService()
    try:
        results = await service.refresh_all()
    finally:
        await service.aclose()
    diagnostics = service.diagnostics()
    for name, result in results.items():
        if result.status is DomainStatus.MOCK:
            logger.info("%s -> mock (%s)", name, diagnostics.get(name))
        else:
            logger.info("%s -> %s", name, result.status.value)


def main() -> None:
    """Configure logging and run a single fetch pass.

    Logging defaults to ``INFO`` to surface operational events such as domain
    transitions and provider failures. Set the ``LOG_LEVEL`` environment
    variable to ``DEBUG`` to see per-request diagnostics.
    """

    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )
    asyncio.run(run_once())


if __name__ == "__main__":
    main()
