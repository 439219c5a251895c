"""Synthetic fallback data for when a provider is down or returns nothing.

The values are not a model of anything: they only need the right shape and a
believable magnitude so the dependent chart draws something legible. Output is
intentionally unseeded.
"""

import math
import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, List, Optional

from src.transform.records import CategoryTally, RankedEntity, TimePoint


class MockKind(str, Enum):
    DISCHARGE = "discharge"
    CARBON_INTENSITY = "carbon-intensity"
    WATER_WITHDRAWAL = "water-withdrawal"


def _hourly_keys(length: int, now: Optional[datetime] = None) -> List[str]:
    # One reading every 7 hours, the last one a step before now.
    now = now or datetime.now(timezone.utc)
    return [(now - timedelta(hours=(length - i) * 7)).isoformat() for i in range(length)]


def _ordinal_keys(length: int, now: Optional[datetime] = None) -> List[str]:
    return [str(i) for i in range(length)]


def _year_keys(length: int, now: Optional[datetime] = None) -> List[str]:
    return [str(2021 - length + 1 + i) for i in range(length)]


@dataclass(frozen=True)
class MockProfile:
    base: float
    amplitude: float
    noise: float
    keys: Callable[..., List[str]]
    wavelength: float = 3.0


PROFILES = {
    MockKind.DISCHARGE: MockProfile(base=100, amplitude=30, noise=15, keys=_hourly_keys),
    MockKind.CARBON_INTENSITY: MockProfile(base=150, amplitude=40, noise=10, keys=_ordinal_keys),
    MockKind.WATER_WITHDRAWAL: MockProfile(base=400, amplitude=25, noise=10, keys=_year_keys),
}


def mock_series(kind: MockKind, length: int, now: Optional[datetime] = None) -> List[TimePoint]:
    """Sinusoid plus bounded noise around the domain's usual magnitude."""

    profile = PROFILES[MockKind(kind)]
    if length <= 0:
        return []
    keys = profile.keys(length, now)
    return [
        TimePoint(
            key=key,
            value=float(
                round(
                    profile.base
                    + profile.amplitude * math.sin(i / profile.wavelength)
                    + profile.noise * random.random()
                )
            ),
        )
        for i, key in enumerate(keys)
    ]


def mock_power_breakdown() -> List[CategoryTally]:
    return [
        CategoryTally(name="Wind", value=28),
        CategoryTally(name="Solar", value=14),
        CategoryTally(name="Hydro", value=10),
        CategoryTally(name="Gas", value=38),
        CategoryTally(name="Coal", value=10),
    ]


def mock_top_entities(n: int = 10) -> List[RankedEntity]:
    """Placeholder countries "Country A" (120) down in steps of five."""

    values = [120, 115, 100, 95, 90, 85, 80, 75, 70, 65]
    return [
        RankedEntity(name=f"Country {chr(ord('A') + i)}", value=float(value), as_of_key="2021")
        for i, value in enumerate(values[: max(n, 0)])
    ]


def mock_waste_categories() -> List[CategoryTally]:
    return [
        CategoryTally(name="Recycling", value=12),
        CategoryTally(name="Composting", value=7),
        CategoryTally(name="Landfill", value=9),
    ]


def mock_structure_types() -> List[str]:
    return ["Facility", "Community", "Commercial"]


MOCK_PARAMETER_COUNT = 42
