"""Normalized record types shared by the transforms and orchestrators.

All records are frozen so a snapshot handed to a chart can never be mutated
back into the data layer.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TimePoint:
    """One point of a chartable series; ``key`` is a year, timestamp, or ordinal."""

    key: str
    value: float


@dataclass(frozen=True)
class CategoryTally:
    name: str
    value: float


@dataclass(frozen=True)
class Observation:
    """A single ``(entity, period, value)`` row of a multi-entity dataset."""

    entity: str
    period: str
    value: float


@dataclass(frozen=True)
class RankedEntity:
    """Latest observation kept for one entity after ranking."""

    name: str
    value: float
    as_of_key: str
