"""Waste-category overview built from the EPA iWASTE metadata catalog."""

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple
import asyncio
import logging

from src.config import config
from src.domains.base import InvocationToken, Orchestrator
from src.sources.base import FailureKind, FetchFailure, FetchOutcome
from src.sources.iwaste import IWasteSource
from src.transform.aggregate import probe_key, tally_by
from src.transform.fields import (
    CATALOG_LIST_FIELDS,
    STRUCTURE_TYPE_FIELDS,
    WASTE_CATEGORY_FIELDS,
    WASTE_NAME_FIELDS,
    as_list,
    as_text,
    probe,
)
from src.transform.mock import (
    MOCK_PARAMETER_COUNT,
    mock_structure_types,
    mock_waste_categories,
)
from src.transform.records import CategoryTally

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WastePayload:
    category_counts: Tuple[CategoryTally, ...] = ()
    structure_types: Tuple[str, ...] = ()
    parameter_count: int = 0


class WasteOrchestrator(Orchestrator):
    """Category tallies, structure types, and parameter count in one pass.

    Categories are counted from the parameter list when it has entries
    (parameters carry a category/group/type field), otherwise from the
    category list itself by name.
    """

    name = "waste"

    def __init__(self, client, settings: Optional[config.Settings] = None) -> None:
        super().__init__(client, settings)
        self.source = IWasteSource(client, self.settings)

    def empty_payload(self) -> WastePayload:
        return WastePayload()

    def mock_payload(self, **params: Any) -> WastePayload:
        return WastePayload(
            category_counts=tuple(mock_waste_categories()),
            structure_types=tuple(mock_structure_types()),
            parameter_count=MOCK_PARAMETER_COUNT,
        )

    def catalog(self, token: InvocationToken, outcome: FetchOutcome) -> List[Any]:
        if isinstance(outcome, FetchFailure):
            token.note(outcome.describe())
            return []
        items = probe(outcome.payload_json, CATALOG_LIST_FIELDS, as_list)
        if not items:
            token.note(f"{outcome.source}: {FailureKind.EMPTY_RESULT.value}")
            return []
        return items

    def structure_types(self, items: List[Any]) -> Tuple[str, ...]:
        names = []
        for item in items:
            name = probe(item, STRUCTURE_TYPE_FIELDS, as_text) or as_text(item)
            if name is None:
                logger.debug("Skipping unreadable structure type %r", item)
                continue
            names.append(name)
        return tuple(names[: config.STRUCTURE_TYPES_LIMIT])

    async def load(self, token: InvocationToken, **params: Any) -> Optional[WastePayload]:
        cats_outcome, params_outcome, structs_outcome = await asyncio.gather(
            self.source.fetch_categories(),
            self.source.fetch_parameters(),
            self.source.fetch_structure_types(),
        )
        categories = self.catalog(token, cats_outcome)
        parameters = self.catalog(token, params_outcome)
        structures = self.catalog(token, structs_outcome)

        if parameters:
            counts = tally_by(parameters, probe_key(WASTE_CATEGORY_FIELDS))
        elif categories:
            counts = tally_by(categories, probe_key(WASTE_NAME_FIELDS))
        else:
            return None

        return WastePayload(
            category_counts=tuple(counts),
            structure_types=self.structure_types(structures),
            parameter_count=len(parameters),
        )
