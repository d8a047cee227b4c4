"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

MAX_IDENTITY_LENGTH = 128


def utc_now() -> datetime:
    """Naive UTC timestamp, matching the database column type."""
    return datetime.now(UTC).replace(tzinfo=None)


@dataclass
class Profile:
    """Domain entity for a registered public profile.

    One per identity. ``handle`` and ``created_at`` never change once the
    profile exists; ``view_count`` only grows.
    """

    identity: str
    content_pointer: str
    handle: str
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    view_count: int = 0

    def replace_content(self, content_pointer: str, now: datetime) -> str:
        """Swap the content pointer and return the previous one."""
        previous = self.content_pointer
        self.content_pointer = content_pointer
        self.updated_at = max(now, self.updated_at)
        return previous

    def add_view(self) -> int:
        """Count one more view and return the new total."""
        self.view_count += 1
        return self.view_count
