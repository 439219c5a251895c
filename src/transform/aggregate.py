"""Pure aggregations over normalized records."""

from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from src.config import config
from src.transform.fields import Accessor, as_number, as_text, probe
from src.transform.records import CategoryTally, Observation, RankedEntity

UNKNOWN = "Unknown"


def latest_per_key(observations: Iterable[Observation]) -> List[RankedEntity]:
    """Keep the most recent observation of every entity.

    Periods are compared numerically (World Bank years); an observation whose
    period is not a number cannot be ordered and is ignored. On equal periods
    the first observation seen wins. Output follows first-appearance order of
    the entities.
    """

    latest: Dict[str, Tuple[float, Observation]] = {}
    for obs in observations:
        if obs.value is None:
            continue
        period = as_number(obs.period)
        if period is None:
            continue
        previous = latest.get(obs.entity)
        if previous is None or period > previous[0]:
            latest[obs.entity] = (period, obs)
    return [
        RankedEntity(name=obs.entity, value=obs.value, as_of_key=obs.period)
        for _, obs in latest.values()
    ]


def is_aggregate(name: str, markers: Sequence[str] = config.AGGREGATE_MARKERS) -> bool:
    lowered = name.lower()
    return any(marker.lower() in lowered for marker in markers)


def exclude_aggregates(
    entities: Iterable[RankedEntity], markers: Sequence[str] = config.AGGREGATE_MARKERS
) -> List[RankedEntity]:
    """Drop regional, income, and other grouping rollups from a per-country list."""

    return [entity for entity in entities if not is_aggregate(entity.name, markers)]


def top_n(entities: Iterable[RankedEntity], n: int = config.TOP_N) -> List[RankedEntity]:
    if n <= 0:
        return []
    return sorted(entities, key=lambda entity: entity.value, reverse=True)[:n]


def rank_latest(
    observations: Iterable[Observation],
    n: int = config.TOP_N,
    markers: Sequence[str] = config.AGGREGATE_MARKERS,
) -> List[RankedEntity]:
    return top_n(exclude_aggregates(latest_per_key(observations), markers), n)


def probe_key(accessors: Tuple[Accessor, ...]) -> Callable[[Any], Optional[str]]:
    """Build a key function reading the first present candidate field as text."""

    def key_fn(record: Any) -> Optional[str]:
        return probe(record, accessors, as_text)

    return key_fn


def tally_by(
    records: Iterable[Any],
    key_fn: Callable[[Any], Optional[str]],
    default: str = UNKNOWN,
) -> List[CategoryTally]:
    """Count records per derived key, in order of first occurrence."""

    counts: Dict[str, int] = {}
    for record in records:
        key = key_fn(record) or default
        counts[key] = counts.get(key, 0) + 1
    return [CategoryTally(name=name, value=count) for name, count in counts.items()]
