"""Turn raw provider JSON into uniform record lists.

Upstream gaps are expected, so a record without a usable value is skipped
rather than reported. ``normalize`` never raises: anything it cannot parse
comes back as an empty list, which orchestrators treat as "no usable data".
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, Union

from src.transform.fields import (
    RecordSchema,
    SchemaKind,
    as_list,
    as_number,
    as_text,
    probe,
)
from src.transform.records import CategoryTally, Observation, TimePoint

logger = logging.getLogger(__name__)

Normalized = Union[List[TimePoint], List[CategoryTally], List[Observation]]


def natural_key(key: str) -> Tuple[int, float, str]:
    """Sort key ordering numbers numerically, then timestamps chronologically, then text."""

    try:
        number = float(key)
        if math.isfinite(number):
            return (0, number, key)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(key.replace("Z", "+00:00"))
    except ValueError:
        return (2, 0.0, key)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return (1, parsed.timestamp(), key)


def _value(record: Any, schema: RecordSchema) -> Optional[float]:
    value = probe(record, schema.value, as_number)
    if value is None:
        return None
    if value < 0 and not schema.allow_negative:
        return None
    if value == 0 and not schema.allow_zero:
        return None
    return value


def _time_series(records: List[Any], schema: RecordSchema) -> List[TimePoint]:
    points: Dict[str, float] = {}
    for idx, record in enumerate(records):
        value = _value(record, schema)
        if value is None:
            continue
        key = probe(record, schema.key, as_text)
        if key is None:
            if schema.index_keys:
                key = str(idx)
            elif schema.key_default is not None:
                key = schema.key_default
            else:
                continue
        # Later duplicates overwrite earlier readings for the same key.
        points[key] = value
    series = [TimePoint(key=key, value=value) for key, value in points.items()]
    if schema.sort_keys:
        series.sort(key=lambda point: natural_key(point.key))
    return series


def _category_tally(records: List[Any], schema: RecordSchema) -> List[CategoryTally]:
    totals: Dict[str, float] = {}
    for record in records:
        value = _value(record, schema)
        if value is None:
            continue
        name = probe(record, schema.key, as_text)
        if name is None:
            continue
        label = schema.label(name)
        totals[label] = totals.get(label, 0.0) + value
    return [CategoryTally(name=name, value=value) for name, value in totals.items()]


def _observations(records: List[Any], schema: RecordSchema) -> List[Observation]:
    rows: List[Observation] = []
    for record in records:
        value = _value(record, schema)
        if value is None:
            continue
        entity = probe(record, schema.entity, as_text)
        period = probe(record, schema.key, as_text)
        if entity is None or period is None:
            continue
        rows.append(Observation(entity=entity, period=period, value=value))
    return rows


def normalize(raw: Any, schema: RecordSchema) -> Normalized:
    """Extract the records ``schema`` describes from ``raw``.

    The input is only read, never modified, so calling this twice on the same
    payload gives the same result.
    """

    try:
        records = probe(raw, schema.records, as_list)
        if not records:
            return []
        if schema.kind is SchemaKind.TIME_SERIES:
            return _time_series(records, schema)
        if schema.kind is SchemaKind.CATEGORY_TALLY:
            return _category_tally(records, schema)
        if schema.kind is SchemaKind.OBSERVATIONS:
            return _observations(records, schema)
    except Exception as exc:  # noqa: BLE001
        logger.debug("Could not normalize %s payload: %s", schema.name, exc)
        return []
    logger.debug("Unknown schema kind %s for %s", schema.kind, schema.name)
    return []
