"""Field-probing tables for the providers' inconsistent JSON shapes.

Providers disagree on field names, casing, and nesting, so every logical field
is described as an ordered tuple of accessor functions. ``probe`` tries them in
order and keeps the first present, non-null value that coerces to the wanted
type. Supporting a new provider (or a renamed field) means adding a tuple here,
not touching the parsing code in ``normalize``.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple

Accessor = Callable[[Any], Any]
Coercer = Callable[[Any], Any]


def field(name: str) -> Accessor:
    """Read ``name`` from a mapping record."""

    def get(record: Any) -> Any:
        if isinstance(record, Mapping):
            return record.get(name)
        return None

    get.__name__ = f"field({name})"
    return get


def path(*steps: Any) -> Accessor:
    """Walk nested mappings (string steps) and lists (integer steps, negatives allowed)."""

    def get(record: Any) -> Any:
        current = record
        for step in steps:
            if isinstance(step, int) and isinstance(current, (list, tuple)):
                if not -len(current) <= step < len(current):
                    return None
                current = current[step]
            elif isinstance(step, str) and isinstance(current, Mapping):
                current = current.get(step)
            else:
                return None
            if current is None:
                return None
        return current

    get.__name__ = "path(" + ".".join(str(s) for s in steps) + ")"
    return get


def itself(record: Any) -> Any:
    return record


def single(record: Any) -> Any:
    """Wrap a lone object response so it can be parsed like a record list."""

    if isinstance(record, Mapping):
        return [record]
    return None


def entries(*accessors: Accessor) -> Accessor:
    """Expand the first mapping found by ``accessors`` into name/value records."""

    def get(record: Any) -> Any:
        mapping = probe(record, accessors, as_mapping)
        if mapping is None:
            return None
        return [{"name": key, "value": value} for key, value in mapping.items()]

    return get


def as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def as_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        text = value.strip()
        return text or None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and math.isfinite(value):
        return str(int(value)) if value.is_integer() else str(value)
    return None


def as_list(value: Any) -> Optional[list]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return None


def as_mapping(value: Any) -> Optional[Mapping]:
    if isinstance(value, Mapping):
        return value
    return None


def probe(record: Any, accessors: Tuple[Accessor, ...], coerce: Optional[Coercer] = None) -> Any:
    """Return the first non-null (and, with ``coerce``, well-typed) candidate."""

    for accessor in accessors:
        value = accessor(record)
        if value is None:
            continue
        if coerce is not None:
            value = coerce(value)
            if value is None:
                continue
        return value
    return None


def capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


class SchemaKind(str, Enum):
    TIME_SERIES = "time-series"
    CATEGORY_TALLY = "category-tally"
    OBSERVATIONS = "observations"


@dataclass(frozen=True)
class RecordSchema:
    """Where a provider keeps its records and how to read each logical field.

    ``records`` locates the record list inside the raw payload. ``key`` is the
    time/period key (or the category name for tallies), ``entity`` the entity
    name for observations. A time point without a key falls back to its
    ordinal index when ``index_keys`` is set, else to ``key_default``, else it
    is dropped.
    """

    name: str
    kind: SchemaKind
    records: Tuple[Accessor, ...]
    value: Tuple[Accessor, ...]
    key: Tuple[Accessor, ...] = ()
    entity: Tuple[Accessor, ...] = ()
    key_default: Optional[str] = None
    index_keys: bool = False
    allow_negative: bool = False
    allow_zero: bool = True
    sort_keys: bool = True
    label: Callable[[str], str] = str


# Candidate names per logical field, in priority order.
INTENSITY_VALUE_FIELDS = (field("carbonIntensity"), field("intensity"), field("value"))
INTENSITY_TIME_FIELDS = (field("datetime"), field("time"), field("timestamp"))
WASTE_CATEGORY_FIELDS = (
    field("category"),
    field("Category"),
    field("group"),
    field("Group"),
    field("type"),
    field("Type"),
)
WASTE_NAME_FIELDS = (field("name"), field("Name"), field("title"), field("Title"))
STRUCTURE_TYPE_FIELDS = (field("name"), field("Name"), field("type"), field("Type"))
HISTORY_LIST_FIELDS = (
    field("history"),
    field("data"),
    field("result"),
    field("breakdown"),
    itself,
)
CATALOG_LIST_FIELDS = (itself, field("data"), field("results"), field("items"))
BREAKDOWN_FIELDS = (field("powerConsumptionBreakdown"), field("powerProductionBreakdown"))


WORLDBANK_SERIES = RecordSchema(
    name="worldbank-series",
    kind=SchemaKind.TIME_SERIES,
    records=(path(1),),
    key=(field("date"),),
    value=(field("value"),),
)

WORLDBANK_OBSERVATIONS = RecordSchema(
    name="worldbank-observations",
    kind=SchemaKind.OBSERVATIONS,
    records=(path(1),),
    entity=(path("country", "value"),),
    key=(field("date"),),
    value=(field("value"),),
)

USGS_INSTANTANEOUS = RecordSchema(
    name="usgs-iv",
    kind=SchemaKind.TIME_SERIES,
    records=(path("value", "timeSeries", 0, "values", 0, "value"),),
    key=(field("dateTime"),),
    # USGS flags missing readings with negative sentinels such as -999999.
    value=(field("value"),),
)

CARBON_INTENSITY_HISTORY = RecordSchema(
    name="carbon-intensity-history",
    kind=SchemaKind.TIME_SERIES,
    records=HISTORY_LIST_FIELDS,
    key=INTENSITY_TIME_FIELDS,
    value=INTENSITY_VALUE_FIELDS,
    index_keys=True,
)

CARBON_INTENSITY_LATEST = RecordSchema(
    name="carbon-intensity-latest",
    kind=SchemaKind.TIME_SERIES,
    records=(single,),
    key=(field("datetime"),),
    value=INTENSITY_VALUE_FIELDS,
    key_default="now",
    allow_zero=False,
)

POWER_BREAKDOWN_LATEST = RecordSchema(
    name="power-breakdown-latest",
    kind=SchemaKind.CATEGORY_TALLY,
    records=(entries(*BREAKDOWN_FIELDS, itself),),
    key=(field("name"),),
    value=(field("value"),),
    allow_zero=False,
    label=capitalize,
)

POWER_BREAKDOWN_HISTORY = RecordSchema(
    name="power-breakdown-history",
    kind=SchemaKind.CATEGORY_TALLY,
    records=(
        entries(
            path("history", -1, "powerConsumptionBreakdown"),
            path("history", -1, "powerProductionBreakdown"),
        ),
    ),
    key=(field("name"),),
    value=(field("value"),),
    allow_zero=False,
    label=capitalize,
)
