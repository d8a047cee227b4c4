"""Profile event (fact) entity and kind constants."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4

from domain.entities.profile import utc_now


class EventKind(StrEnum):
    """Kinds of facts emitted by successful registry mutations."""

    CREATED = "created"
    UPDATED = "updated"
    VIEW_RECORDED = "view_recorded"


@dataclass(frozen=True)
class ProfileEvent:
    """Immutable record of one successful mutation.

    ``actor`` is the caller identity that triggered the mutation, when known.
    """

    kind: EventKind
    identity: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=utc_now)
    actor: str | None = None
    id: UUID = field(default_factory=uuid4)

    def with_actor(self, actor: str | None) -> "ProfileEvent":
        """Return a copy attributed to ``actor``."""
        return ProfileEvent(
            kind=self.kind,
            identity=self.identity,
            payload=dict(self.payload),
            timestamp=self.timestamp,
            actor=actor,
            id=self.id,
        )
