"""
Batch processing of webhook deltas.

A Nylas webhook carries a list of deltas. Each one is dispatched to its
handler independently: one failing handler must not stop the rest of the
batch, and the sender gets a per-delta report instead of a blanket error.

Deltas that touch the same resource (same resource type, grant and object ID)
run sequentially in delivery order, so a `created` followed by a `deleted`
in one batch cannot race. A `grant.expired` or `grant.deleted` clears the
whole grant, so it is ordered with every other delta of that grant. Unrelated
resources run concurrently.
"""

import asyncio
import time
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any

import structlog

from src.core.errors import MalformedPayloadError, PipelineError
from src.core.models import ResourceType
from src.core.utils.timeout import execute_with_timeout
from src.webhooks.dispatcher import WebhookDispatcher
from src.webhooks.models import DeltaError, ProcessingResult, WebhookDelta, WebhookPayload

logger = structlog.get_logger()


@dataclass(frozen=True)
class DeltaOutcome:
    """Result of running one delta; produced by exactly one task."""

    index: int
    delta_id: str
    delta_type: str
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


def revoked_grants(deltas: list[WebhookDelta]) -> frozenset[str]:
    """Grants that some delta in the batch expires or deletes."""
    revoked: set[str] = set()
    for delta in deltas:
        event_type = delta.event_type
        grant_id = delta.grant_id or delta.resource_id
        if event_type is not None and event_type.revokes_grant and grant_id:
            revoked.add(grant_id)
    return frozenset(revoked)


def resource_key(index: int, delta: WebhookDelta, revoked: frozenset[str] = frozenset()) -> Hashable:
    """
    Key deltas that must be applied in order; unkeyable deltas get a key of their own.

    A grant revocation clears every cached resource of the grant, so when one is
    in the batch all deltas of that grant share a single key.
    """
    event_type = delta.event_type
    grant_id = delta.grant_id
    if event_type is not None and event_type.resource is ResourceType.GRANT:
        grant_id = grant_id or delta.resource_id
    if grant_id in revoked:
        return ("grant", grant_id)

    resource_id = delta.resource_id
    if event_type is None or resource_id is None:
        return ("delta", index)
    return (event_type.resource.value, grant_id, resource_id)


def group_deltas(deltas: list[WebhookDelta]) -> list[list[tuple[int, WebhookDelta]]]:
    """Group deltas by resource key, keeping delivery order within each group."""
    revoked = revoked_grants(deltas)
    groups: dict[Hashable, list[tuple[int, WebhookDelta]]] = {}
    for index, delta in enumerate(deltas):
        groups.setdefault(resource_key(index, delta, revoked), []).append((index, delta))
    return list(groups.values())


class BatchEventProcessor:
    """Runs a webhook payload's deltas through the dispatcher with per-delta isolation."""

    def __init__(self, dispatcher: WebhookDispatcher, handler_timeout: float | None = 30.0):
        self.dispatcher = dispatcher
        self.handler_timeout = handler_timeout or None

    async def process(self, payload: WebhookPayload) -> ProcessingResult:
        """
        Process every delta in the payload and aggregate the outcomes.

        Per-delta failures are recorded in the result and never raised.

        Raises:
            MalformedPayloadError: If the payload has no list of deltas.
            PipelineError: If the batch fails outside the per-delta boundary.

        Returns:
            ProcessingResult where processed + failed == len(deltas).
        """
        start_time = time.perf_counter()
        deltas = self._deltas_of(payload)

        try:
            groups = group_deltas(deltas)
            logger.info(
                "batch_processing_started",
                delta_count=len(deltas),
                group_count=len(groups),
                types=[delta.type for delta in deltas],
            )

            group_outcomes = await asyncio.gather(*(self._run_group(group) for group in groups))
        except Exception as e:
            logger.error("batch_processing_failed", delta_count=len(deltas), error=str(e), exc_info=True)
            raise PipelineError(str(e) or None) from e

        outcomes = sorted((outcome for group in group_outcomes for outcome in group), key=lambda o: o.index)
        result = ProcessingResult(
            processed=sum(1 for outcome in outcomes if outcome.succeeded),
            failed=sum(1 for outcome in outcomes if not outcome.succeeded),
            errors=[
                DeltaError(id=outcome.delta_id, type=outcome.delta_type, message=outcome.error)
                for outcome in outcomes
                if outcome.error is not None
            ],
            duration=int((time.perf_counter() - start_time) * 1000),
        )

        logger.info(
            "batch_processing_complete",
            processed=result.processed,
            failed=result.failed,
            duration_ms=result.duration,
        )
        return result

    async def process_delta(self, delta: WebhookDelta) -> ProcessingResult:
        """Process a single delta with the same isolation as a batch."""
        return await self.process(WebhookPayload(deltas=[delta]))

    @staticmethod
    def _deltas_of(payload: Any) -> list[WebhookDelta]:
        deltas = getattr(payload, "deltas", None)
        if not isinstance(deltas, list):
            raise MalformedPayloadError()
        return deltas

    async def _run_group(self, group: list[tuple[int, WebhookDelta]]) -> list[DeltaOutcome]:
        return [await self._run_delta(index, delta) for index, delta in group]

    async def _run_delta(self, index: int, delta: WebhookDelta) -> DeltaOutcome:
        try:
            await execute_with_timeout(
                self.dispatcher.dispatch(delta),
                timeout=self.handler_timeout,
                timeout_message=f"Handler for {delta.type} timed out after {self.handler_timeout} seconds",
            )
        except Exception as e:
            logger.error(
                "delta_failed",
                event_id=delta.id,
                event_type=delta.type,
                grant_id=delta.grant_id,
                error=str(e),
                exc_info=True,
            )
            return DeltaOutcome(index=index, delta_id=delta.id, delta_type=delta.type, error=str(e) or type(e).__name__)

        return DeltaOutcome(index=index, delta_id=delta.id, delta_type=delta.type)
