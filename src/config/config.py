"""Centralized configuration and defaults for the EcoPulse data layer.

Constants live at module level so sources, transforms, and orchestrators all
read from one place. Values that may differ per deployment (base URLs, API
keys, the monitored river site, the grid zone) are resolved once into a
``Settings`` object and handed to every orchestrator explicitly.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

WORLDBANK_BASE = "https://api.worldbank.org/v2"
USGS_BASE = "https://waterservices.usgs.gov/nwis"
CARBON_BASE = "https://api.electricitymap.org"
IWASTE_BASE = "https://iwaste.epa.gov"

USGS_SITE_ID = "01646500"
USGS_AUTH_HEADER = "X-Api-Key"
# Discharge, cubic feet per second
USGS_PARAMETER_CODES = ("00060",)
USGS_PERIOD = "P7D"

CARBON_AUTH_HEADER = "auth-token"
CARBON_ZONE = "US"

# Annual freshwater withdrawals, billion cubic meters
WATER_INDICATOR = "ER.H2O.FWTL.K3"
WATER_WORLD_ENTITY = "WLD"
WATER_WORLD_DATES = (1990, 2023)
WATER_RANKING_DATES = (2015, 2023)
WB_PER_PAGE = 20000
TOP_N = 10

# Name fragments identifying World Bank regional/income/grouping rollups.
AGGREGATE_MARKERS = (
    "world",
    "income",
    "area",
    "union",
    "members",
    "caribbean",
    "asia",
    "europe",
    "africa",
    "america",
    "pacific",
    "emerging",
    "high",
    "low",
    "upper",
    "lower",
    "oecd",
    "euro",
)

MOCK_DISCHARGE_LENGTH = 24
MOCK_INTENSITY_LENGTH = 24
MOCK_WITHDRAWAL_LENGTH = 10
STRUCTURE_TYPES_LIMIT = 10

USER_AGENT = "EcoPulseDashboard/1.0"
# No timeout unless REQUEST_TIMEOUT is set; a hung provider keeps its domain loading.
REQUEST_TIMEOUT: Optional[float] = None


def _env(environ: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    value = environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _base(environ: Mapping[str, str], name: str, default: str) -> str:
    return (_env(environ, name, default) or default).rstrip("/")


def _timeout(environ: Mapping[str, str]) -> Optional[float]:
    raw = _env(environ, "REQUEST_TIMEOUT")
    if raw is None:
        return REQUEST_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return REQUEST_TIMEOUT
    return value if value > 0 else REQUEST_TIMEOUT


@dataclass(frozen=True)
class Settings:
    """Deployment knobs resolved once at startup.

    Every field is optional in the environment and falls back to the literal
    default above, so the dashboard runs with zero configuration (serving mock
    data wherever a default does not reach a live provider).
    """

    worldbank_base: str = WORLDBANK_BASE
    usgs_base: str = USGS_BASE
    usgs_site_id: str = USGS_SITE_ID
    usgs_auth_header: Optional[str] = USGS_AUTH_HEADER
    usgs_api_key: Optional[str] = None
    carbon_base: str = CARBON_BASE
    carbon_auth_header: Optional[str] = CARBON_AUTH_HEADER
    carbon_api_key: Optional[str] = None
    carbon_zone: Optional[str] = CARBON_ZONE
    iwaste_base: str = IWASTE_BASE
    iwaste_auth_header: Optional[str] = None
    iwaste_api_key: Optional[str] = None
    request_timeout: Optional[float] = REQUEST_TIMEOUT
    user_agent: str = USER_AGENT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            worldbank_base=_base(env, "WORLDBANK_BASE", WORLDBANK_BASE),
            usgs_base=_base(env, "USGS_BASE", USGS_BASE),
            usgs_site_id=_env(env, "USGS_SITE_ID", USGS_SITE_ID),
            usgs_auth_header=_env(env, "USGS_AUTH_HEADER", USGS_AUTH_HEADER),
            usgs_api_key=_env(env, "USGS_API_KEY"),
            carbon_base=_base(env, "CARBON_BASE", CARBON_BASE),
            carbon_auth_header=_env(env, "CARBON_AUTH_HEADER", CARBON_AUTH_HEADER),
            carbon_api_key=_env(env, "CARBON_API_KEY"),
            carbon_zone=_env(env, "CARBON_ZONE", CARBON_ZONE),
            iwaste_base=_base(env, "IWASTE_BASE", IWASTE_BASE),
            iwaste_auth_header=_env(env, "IWASTE_AUTH_HEADER"),
            iwaste_api_key=_env(env, "IWASTE_API_KEY"),
            request_timeout=_timeout(env),
            user_agent=_env(env, "USER_AGENT", USER_AGENT),
        )
