from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.core.models import EventType


class WebhookDeltaData(BaseModel):
    """The `data` envelope of a Nylas delta."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    resource: dict[str, Any] = Field(..., alias="object", description="Provider representation of the resource")
    grant_id: str | None = Field(None, description="Connected account the event belongs to")
    application_id: str | None = Field(None, description="Nylas application ID")


class WebhookDelta(BaseModel):
    """A single event notification inside a webhook payload."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Provider-assigned event ID")
    type: str = Field(..., description="Event name, e.g. 'message.created'")
    specversion: str | None = Field(None, description="CloudEvents spec version")
    source: str | None = Field(None, description="Event source")
    time: str | int | None = Field(None, description="Event timestamp, informational only")
    data: WebhookDeltaData

    @property
    def event_type(self) -> EventType | None:
        return EventType.from_value(self.type)

    @property
    def grant_id(self) -> str | None:
        """Grant ID from the envelope, falling back to the object (Nylas v3 places it there)."""
        grant_id = self.data.grant_id or self.data.resource.get("grant_id")
        return str(grant_id) if grant_id else None

    @property
    def resource_id(self) -> str | None:
        resource_id = self.data.resource.get("id")
        return str(resource_id) if resource_id is not None else None

    def to_wire(self) -> dict[str, Any]:
        """Dump using provider field names, as received."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class WebhookPayload(BaseModel):
    """Envelope received from Nylas."""

    deltas: list[WebhookDelta] = Field(..., description="Deltas in delivery order")


class DeltaError(BaseModel):
    """A delta whose handler raised."""

    id: str
    type: str
    message: str


class ProcessingResult(BaseModel):
    """Aggregated outcome of a batch run."""

    processed: int = 0
    failed: int = 0
    errors: list[DeltaError] = Field(default_factory=list)
    duration: int = Field(0, description="Wall-clock milliseconds for the batch")


class WebhookResponse(BaseModel):
    """Response body for an accepted webhook."""

    success: bool = True
    processed: int
    failed: int
    errors: list[DeltaError]
    duration: int
    timestamp: str
