"""Per-domain fetch orchestration.

An orchestrator sequences source -> normalizer -> aggregator for one data
domain and publishes a ``DomainResult`` on every state change:

    idle -> loading -> success   (at least one usable record)
    idle -> loading -> mock      (every endpoint failed or came back empty)

There is no error state for consumers. Failures are logged and kept in
``Orchestrator.diagnostic``, and the domain settles on mock data instead.

Each ``run`` is an invocation with its own ``InvocationToken``. Starting a new
invocation (or calling ``cancel`` on unmount) bumps a generation counter; an
older invocation that finishes later sees that its token is superseded and
drops its result instead of overwriting the newer one. Requests already in
flight are not aborted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple
import logging

from src.config import config
from src.sources.base import FailureKind, FetchFailure, FetchOutcome, ProviderClient
from src.transform.fields import RecordSchema
from src.transform.normalize import normalize

logger = logging.getLogger(__name__)


class DomainStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    MOCK = "mock"

    @property
    def terminal(self) -> bool:
        return self in (DomainStatus.SUCCESS, DomainStatus.MOCK)


@dataclass(frozen=True)
class DomainResult:
    """Immutable snapshot handed to consumers."""

    status: DomainStatus
    payload: Any


Listener = Callable[[str, DomainResult], None]
Attempt = Tuple[Callable[[], Awaitable[FetchOutcome]], RecordSchema]


class InvocationToken:
    """Identity of one ``run``; compared against the owner's generation at publish time."""

    def __init__(self, owner: "Orchestrator", generation: int) -> None:
        self._owner = owner
        self.generation = generation
        self.causes: List[str] = []

    @property
    def superseded(self) -> bool:
        return self._owner.generation != self.generation

    def note(self, cause: str) -> None:
        self.causes.append(cause)

    def diagnostic(self) -> str:
        return "; ".join(self.causes) or FailureKind.EMPTY_RESULT.value


class Orchestrator:
    """Base class; subclasses define ``load`` plus empty and mock payloads."""

    name: str

    def __init__(self, client: ProviderClient, settings: Optional[config.Settings] = None) -> None:
        self.client = client
        self.settings = settings or client.settings
        self.generation = 0
        self.diagnostic: Optional[str] = None
        self._listeners: List[Listener] = []
        self._result = DomainResult(DomainStatus.IDLE, self.empty_payload())

    @property
    def result(self) -> DomainResult:
        return self._result

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def cancel(self) -> None:
        """Invalidate the running invocation (the consumer lost interest)."""

        self.generation += 1
        logger.debug("%s: invocation cancelled (generation %s)", self.name, self.generation)

    def _publish(self, token: InvocationToken, result: DomainResult) -> bool:
        if token.superseded:
            logger.debug(
                "%s: dropping stale %s from invocation %s (current %s)",
                self.name,
                result.status.value,
                token.generation,
                self.generation,
            )
            return False
        self._result = result
        for listener in list(self._listeners):
            try:
                listener(self.name, result)
            except Exception:  # noqa: BLE001
                logger.exception("%s: status listener failed", self.name)
        return True

    async def run(self, **params: Any) -> DomainResult:
        """Fetch the domain once and publish the outcome.

        Returns the domain's current snapshot, which belongs to a newer
        invocation if this one was superseded while it was waiting.
        """

        self.generation += 1
        token = InvocationToken(self, self.generation)
        self._publish(token, DomainResult(DomainStatus.IDLE, self.empty_payload()))
        self._publish(token, DomainResult(DomainStatus.LOADING, self.empty_payload()))

        try:
            payload = await self.load(token, **params)
        except Exception as exc:  # noqa: BLE001
            logger.exception("%s: unexpected failure while loading", self.name)
            token.note(f"unexpected {type(exc).__name__}: {exc}")
            payload = None

        if payload is None:
            outcome = DomainResult(DomainStatus.MOCK, self.mock_payload(**params))
        else:
            outcome = DomainResult(DomainStatus.SUCCESS, payload)

        if self._publish(token, outcome):
            if outcome.status is DomainStatus.MOCK:
                self.diagnostic = token.diagnostic()
                logger.warning("%s: serving mock data (%s)", self.name, self.diagnostic)
            else:
                self.diagnostic = None
                logger.info("%s: live data loaded", self.name)
        return self._result

    def records(self, token: InvocationToken, outcome: FetchOutcome, schema: RecordSchema) -> list:
        """Normalize a fetch outcome, noting why nothing came back."""

        if isinstance(outcome, FetchFailure):
            token.note(outcome.describe())
            return []
        records = normalize(outcome.payload_json, schema)
        if not records:
            logger.info("%s: %s had no usable records", self.name, outcome.source)
            token.note(f"{outcome.source}: {FailureKind.EMPTY_RESULT.value}")
        return records

    async def first_usable(self, token: InvocationToken, attempts: Sequence[Attempt]) -> list:
        """Await candidate endpoints in priority order; keep the first with records."""

        for fetch, schema in attempts:
            records = self.records(token, await fetch(), schema)
            if records:
                return records
        return []

    def empty_payload(self) -> Any:
        raise NotImplementedError

    def mock_payload(self, **params: Any) -> Any:
        raise NotImplementedError

    async def load(self, token: InvocationToken, **params: Any) -> Any:
        """Return the live payload, or ``None`` when no usable data came back."""

        raise NotImplementedError
