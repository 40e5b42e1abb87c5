from enum import Enum


class ResourceType(str, Enum):
    """Resource families a webhook delta can refer to."""

    CALENDAR = "calendar"
    MESSAGE = "message"
    CONTACT = "contact"
    GRANT = "grant"
    THREAD = "thread"


class EventType(str, Enum):
    """Supported Nylas webhook event types."""

    CALENDAR_CREATED = "calendar.created"
    CALENDAR_UPDATED = "calendar.updated"
    CALENDAR_DELETED = "calendar.deleted"
    EVENT_CREATED = "event.created"
    EVENT_UPDATED = "event.updated"
    EVENT_DELETED = "event.deleted"
    MESSAGE_CREATED = "message.created"
    MESSAGE_UPDATED = "message.updated"
    MESSAGE_DELETED = "message.deleted"
    EMAIL_CREATED = "email.created"
    EMAIL_UPDATED = "email.updated"
    EMAIL_DELETED = "email.deleted"
    THREAD_REPLIED = "thread.replied"
    CONTACT_CREATED = "contact.created"
    CONTACT_UPDATED = "contact.updated"
    CONTACT_DELETED = "contact.deleted"
    GRANT_CREATED = "grant.created"
    GRANT_UPDATED = "grant.updated"
    GRANT_EXPIRED = "grant.expired"
    GRANT_DELETED = "grant.deleted"
    # Add other event types here as we support them

    @classmethod
    def from_value(cls, value: str) -> "EventType | None":
        """Return the member for a raw event string, or None if unsupported."""
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def resource(self) -> ResourceType:
        return _EVENT_RESOURCES[self]

    @property
    def is_deletion(self) -> bool:
        return self in _DELETIONS

    @property
    def revokes_grant(self) -> bool:
        """True for events after which nothing cached for the grant is valid."""
        return self in _GRANT_REVOCATIONS


_EVENT_RESOURCES: dict[EventType, ResourceType] = {
    EventType.CALENDAR_CREATED: ResourceType.CALENDAR,
    EventType.CALENDAR_UPDATED: ResourceType.CALENDAR,
    EventType.CALENDAR_DELETED: ResourceType.CALENDAR,
    EventType.EVENT_CREATED: ResourceType.CALENDAR,
    EventType.EVENT_UPDATED: ResourceType.CALENDAR,
    EventType.EVENT_DELETED: ResourceType.CALENDAR,
    EventType.MESSAGE_CREATED: ResourceType.MESSAGE,
    EventType.MESSAGE_UPDATED: ResourceType.MESSAGE,
    EventType.MESSAGE_DELETED: ResourceType.MESSAGE,
    EventType.EMAIL_CREATED: ResourceType.MESSAGE,
    EventType.EMAIL_UPDATED: ResourceType.MESSAGE,
    EventType.EMAIL_DELETED: ResourceType.MESSAGE,
    EventType.THREAD_REPLIED: ResourceType.THREAD,
    EventType.CONTACT_CREATED: ResourceType.CONTACT,
    EventType.CONTACT_UPDATED: ResourceType.CONTACT,
    EventType.CONTACT_DELETED: ResourceType.CONTACT,
    EventType.GRANT_CREATED: ResourceType.GRANT,
    EventType.GRANT_UPDATED: ResourceType.GRANT,
    EventType.GRANT_EXPIRED: ResourceType.GRANT,
    EventType.GRANT_DELETED: ResourceType.GRANT,
}

_DELETIONS = frozenset(
    {
        EventType.CALENDAR_DELETED,
        EventType.EVENT_DELETED,
        EventType.MESSAGE_DELETED,
        EventType.EMAIL_DELETED,
        EventType.CONTACT_DELETED,
        EventType.GRANT_DELETED,
    }
)

_GRANT_REVOCATIONS = frozenset({EventType.GRANT_EXPIRED, EventType.GRANT_DELETED})
