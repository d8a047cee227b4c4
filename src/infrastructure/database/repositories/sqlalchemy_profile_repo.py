"""SQLAlchemy implementation of Profile repository."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Profile
from infrastructure.database.models import ProfileModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def load_all(self) -> list[Profile]:
        """Load every profile ordered by roster position."""
        stmt = select(ProfileModel).order_by(ProfileModel.roster_position)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def save(self, profile: Profile) -> Profile:
        """Insert a new profile at the end of the roster, or replace an existing row."""
        model = await self._session.get(ProfileModel, profile.identity)

        if model is None:
            stmt = select(func.coalesce(func.max(ProfileModel.roster_position), -1))
            last_position = (await self._session.execute(stmt)).scalar_one()
            model = ProfileModel(
                identity=profile.identity,
                handle=profile.handle,
                roster_position=last_position + 1,
            )
            self._session.add(model)

        model.content_pointer = profile.content_pointer
        model.view_count = profile.view_count
        model.created_at = profile.created_at
        model.updated_at = profile.updated_at

        await self._session.flush()
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: ProfileModel) -> Profile:
        return Profile(
            identity=model.identity,
            content_pointer=model.content_pointer,
            handle=model.handle,
            created_at=model.created_at,
            updated_at=model.updated_at,
            view_count=model.view_count,
        )
