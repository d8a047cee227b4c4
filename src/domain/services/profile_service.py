"""Profile service layer: applies registry mutations and persists them."""

import asyncio
from collections.abc import Callable

import structlog

from domain.entities.event import ProfileEvent
from domain.entities.profile import Profile
from domain.entities.ranking import LeaderboardEntry, RegistryStats
from domain.registry.profile_store import ProfileStore, RegistrySnapshot
from domain.registry.ranking import RankingEngine
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.access_policy import AdminAccessPolicy

logger = structlog.get_logger()


class ProfileService:
    """Service layer for the profile registry.

    Mutations are serialised: each one is applied to the in-memory store and
    then written, with its event, in a single Unit of Work. If the write
    fails the store is rolled back to its state before the mutation and then
    reloaded from the database, so memory never runs ahead of durable state.
    """

    def __init__(
        self,
        store: ProfileStore,
        uow_factory: Callable[[], IUnitOfWork],
        access_policy: AdminAccessPolicy,
    ) -> None:
        self._store = store
        self._ranking = RankingEngine(store)
        self._uow_factory = uow_factory
        self._access_policy = access_policy
        self._write_lock = asyncio.Lock()

    async def reload(self) -> int:
        """Load all persisted profiles into the store. Returns the count."""
        async with self._uow_factory() as uow:
            profiles = await uow.profiles.load_all()
        self._store.load(profiles)
        logger.info("registry_loaded", profile_count=len(profiles))
        return len(profiles)

    # --- Mutations ---

    async def create_profile(self, caller: str, content_pointer: str, handle: str) -> Profile:
        """Register a profile for the calling identity."""
        async with self._write_lock:
            before = self._store.snapshot()
            event = self._store.create_profile(caller, content_pointer, handle)
            return await self._persist(event.with_actor(caller), before)

    async def update_profile(self, caller: str, content_pointer: str) -> tuple[Profile, str]:
        """Replace the caller's content pointer. Returns the profile and the old pointer."""
        async with self._write_lock:
            before = self._store.snapshot()
            event = self._store.update_profile(caller, content_pointer)
            profile = await self._persist(event.with_actor(caller), before)
            return profile, event.payload["previous_content_pointer"]

    async def record_view(self, identity: str, viewer: str | None = None) -> Profile:
        """Count a view of ``identity``'s profile by ``viewer`` (may be anonymous)."""
        async with self._write_lock:
            before = self._store.snapshot()
            event = self._store.record_view(identity, viewer)
            return await self._persist(event, before)

    async def override_profile(
        self, caller: str, identity: str, content_pointer: str
    ) -> tuple[Profile, str]:
        """Admin-only overwrite of another identity's content pointer."""
        authorized = self._access_policy.is_privileged(caller)
        async with self._write_lock:
            before = self._store.snapshot()
            event = self._store.privileged_override(identity, content_pointer, authorized)
            profile = await self._persist(event.with_actor(caller), before)
            logger.warning(
                "profile_overridden",
                identity=identity,
                actor=caller,
                previous_content_pointer=event.payload["previous_content_pointer"],
            )
            return profile, event.payload["previous_content_pointer"]

    # --- Queries ---

    def get_profile(self, identity: str) -> Profile:
        """Get a profile by owner identity."""
        return self._store.get_profile(identity)

    def get_profile_by_handle(self, handle: str) -> Profile:
        """Get a profile by its handle."""
        return self._store.get_profile_by_handle(handle)

    def is_handle_available(self, handle: str) -> bool:
        """Check whether a handle could be claimed right now."""
        return self._store.is_handle_available(handle)

    def is_handle_claimed(self, handle: str) -> bool:
        """Check whether a handle is already registered."""
        return self._store.is_handle_claimed(handle)

    def list_identities(self, offset: int, limit: int) -> list[str]:
        """Page through identities in creation order."""
        return self._ranking.list_identities(offset, limit)

    def top_profiles(self, limit: int) -> list[LeaderboardEntry]:
        """Get the most viewed profiles."""
        return self._ranking.top_profiles(limit)

    def stats(self) -> RegistryStats:
        """Get registry-wide totals."""
        return self._ranking.stats()

    async def get_recent_events(self, identity: str, limit: int = 50) -> list[ProfileEvent]:
        """Get the persisted event history for an existing profile."""
        self._store.get_profile(identity)
        async with self._uow_factory() as uow:
            return await uow.events.get_for_identity(identity, limit=limit)  # type: ignore[no-any-return]

    # --- Internals ---

    async def _persist(self, event: ProfileEvent, before: RegistrySnapshot) -> Profile:
        profile = self._store.get_profile(event.identity)
        try:
            async with self._uow_factory() as uow:
                await uow.profiles.save(profile)
                await uow.events.append(event)
                await uow.commit()
        except Exception:
            logger.error(
                "profile_persist_failed",
                kind=event.kind.value,
                identity=event.identity,
                exc_info=True,
            )
            self._store.restore(before)
            try:
                await self.reload()
            except Exception:
                logger.error("registry_reload_failed", exc_info=True)
            raise

        logger.info(
            "profile_event",
            event_id=str(event.id),
            kind=event.kind.value,
            identity=event.identity,
            actor=event.actor,
            payload=event.payload,
        )
        return profile
