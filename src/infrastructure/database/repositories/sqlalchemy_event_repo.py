"""SQLAlchemy implementation of the profile event log."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.event import EventKind, ProfileEvent
from infrastructure.database.models import ProfileEventModel


class SQLAlchemyProfileEventRepository:
    """SQLAlchemy implementation of IProfileEventRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(self, event: ProfileEvent) -> ProfileEvent:
        """Append a fact to the log."""
        model = ProfileEventModel(
            id=event.id,
            kind=event.kind.value,
            identity=event.identity,
            actor=event.actor,
            payload=dict(event.payload),
            created_at=event.timestamp,
        )
        self._session.add(model)
        await self._session.flush()
        return event

    async def get_for_identity(self, identity: str, limit: int = 50) -> list[ProfileEvent]:
        """Get facts about one identity, newest first."""
        stmt = (
            select(ProfileEventModel)
            .where(ProfileEventModel.identity == identity)
            .order_by(ProfileEventModel.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    @staticmethod
    def _to_entity(model: ProfileEventModel) -> ProfileEvent:
        return ProfileEvent(
            id=model.id,
            kind=EventKind(model.kind),
            identity=model.identity,
            actor=model.actor,
            payload=dict(model.payload or {}),
            timestamp=model.created_at,
        )
