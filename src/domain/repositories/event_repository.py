"""Profile event repository protocol."""

from typing import Protocol

from domain.entities.event import ProfileEvent


class IProfileEventRepository(Protocol):
    """Repository interface for the append-only event log."""

    async def append(self, event: ProfileEvent) -> ProfileEvent:
        """Append a fact to the log."""
        ...

    async def get_for_identity(self, identity: str, limit: int = 50) -> list[ProfileEvent]:
        """Get facts about one identity, newest first."""
        ...
