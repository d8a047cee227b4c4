"""Profile repository protocol."""

from typing import Protocol

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for durable Profile storage."""

    async def load_all(self) -> list[Profile]:
        """Load every profile in roster (creation) order."""
        ...

    async def save(self, profile: Profile) -> Profile:
        """Insert a new profile or replace the stored copy."""
        ...
