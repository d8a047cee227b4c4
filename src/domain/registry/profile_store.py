"""In-memory profile store.

Owns the canonical identity -> profile mapping, both handle indexes, the
append-only roster and the running totals. Every mutation and every read
holds a single re-entrant lock, so no caller can observe a profile without
its handle entries (or the reverse).
"""

import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import datetime

from core.exceptions import (
    AuthorizationError,
    EmptyContentPointerError,
    HandleNotFoundError,
    HandleTakenError,
    HandleTooLongError,
    HandleTooShortError,
    InvalidHandleCharactersError,
    ProfileAlreadyExistsError,
    ProfileNotFoundError,
    RegistryConsistencyError,
)
from domain.entities.event import EventKind, ProfileEvent
from domain.entities.handle import (
    MAX_HANDLE_LENGTH,
    MIN_HANDLE_LENGTH,
    is_valid_handle_charset,
    is_valid_handle_length,
)
from domain.entities.profile import Profile, utc_now


@dataclass(frozen=True)
class RegistrySnapshot:
    """Consistent copy of the registry at one instant."""

    roster: tuple[str, ...]
    profiles: Mapping[str, Profile]


class ProfileStore:
    """Invariant-preserving store for registry profiles."""

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._profiles: dict[str, Profile] = {}
        self._identity_by_handle: dict[str, str] = {}
        self._handle_by_identity: dict[str, str] = {}
        self._roster: list[str] = []
        self._total_profiles = 0
        self._total_views = 0

    # --- Handle predicates ---

    def is_handle_claimed(self, handle: str) -> bool:
        """Check whether the handle is present in the handle index."""
        with self._lock:
            return handle in self._identity_by_handle

    def is_handle_available(self, handle: str) -> bool:
        """Unclaimed, within length bounds and made of allowed characters."""
        return (
            is_valid_handle_length(handle)
            and is_valid_handle_charset(handle)
            and not self.is_handle_claimed(handle)
        )

    # --- Mutations ---

    def create_profile(self, identity: str, content_pointer: str, handle: str) -> ProfileEvent:
        """Register a new profile for ``identity``.

        Checks run in a fixed order and the first failure wins: handle too
        short, too long, taken, bad characters, profile already exists,
        empty content pointer.
        """
        with self._lock:
            if len(handle) < MIN_HANDLE_LENGTH:
                raise HandleTooShortError(handle, MIN_HANDLE_LENGTH)
            if len(handle) > MAX_HANDLE_LENGTH:
                raise HandleTooLongError(handle, MAX_HANDLE_LENGTH)
            if handle in self._identity_by_handle:
                raise HandleTakenError(handle)
            if not is_valid_handle_charset(handle):
                raise InvalidHandleCharactersError(handle)
            if identity in self._profiles:
                raise ProfileAlreadyExistsError(identity)
            if not content_pointer:
                raise EmptyContentPointerError()

            now = self._clock()
            profile = Profile(
                identity=identity,
                content_pointer=content_pointer,
                handle=handle,
                created_at=now,
                updated_at=now,
            )
            self._profiles[identity] = profile
            self._identity_by_handle[handle] = identity
            self._handle_by_identity[identity] = handle
            self._roster.append(identity)
            self._total_profiles += 1

            return ProfileEvent(
                kind=EventKind.CREATED,
                identity=identity,
                payload={"handle": handle, "content_pointer": content_pointer},
                timestamp=now,
            )

    def update_profile(self, identity: str, content_pointer: str) -> ProfileEvent:
        """Replace the content pointer of an existing profile.

        The returned event carries the previous pointer under
        ``previous_content_pointer``.
        """
        with self._lock:
            profile = self._require(identity)
            if not content_pointer:
                raise EmptyContentPointerError()
            return self._replace_content(profile, content_pointer, privileged=False)

    def privileged_override(
        self, identity: str, content_pointer: str, authorized: bool
    ) -> ProfileEvent:
        """Overwrite a profile's content pointer on behalf of the admin.

        Authorization is decided by the caller; only profile existence is
        checked here, so an empty pointer is accepted.
        """
        if not authorized:
            raise AuthorizationError(
                "Privileged override requires the admin identity",
                details={"identity": identity},
            )
        with self._lock:
            profile = self._require(identity)
            return self._replace_content(profile, content_pointer, privileged=True)

    def record_view(self, identity: str, viewer: str | None = None) -> ProfileEvent:
        """Count one view of ``identity``'s profile.

        The viewer needs no profile of its own, and self-views count.
        """
        with self._lock:
            profile = self._require(identity)
            view_count = profile.add_view()
            self._total_views += 1
            return ProfileEvent(
                kind=EventKind.VIEW_RECORDED,
                identity=identity,
                payload={"viewer": viewer, "view_count": view_count},
                timestamp=self._clock(),
                actor=viewer,
            )

    def load(self, profiles: Iterable[Profile]) -> None:
        """Replace all state with ``profiles``, given in roster order.

        The input is validated in full before anything is swapped in, so a
        rejected load leaves the previous state untouched.
        """
        loaded: dict[str, Profile] = {}
        by_handle: dict[str, str] = {}
        roster: list[str] = []
        total_views = 0

        for source in profiles:
            profile = replace(source)
            if profile.identity in loaded:
                raise RegistryConsistencyError(
                    "Duplicate identity in persisted profiles",
                    {"identity": profile.identity},
                )
            if profile.handle in by_handle:
                raise RegistryConsistencyError(
                    "Handle claimed by more than one identity",
                    {"handle": profile.handle},
                )
            if not (
                is_valid_handle_length(profile.handle)
                and is_valid_handle_charset(profile.handle)
            ):
                raise RegistryConsistencyError(
                    "Persisted handle breaks the handle rules",
                    {"handle": profile.handle},
                )
            if profile.view_count < 0:
                raise RegistryConsistencyError(
                    "Negative view count",
                    {"identity": profile.identity},
                )
            if profile.updated_at < profile.created_at:
                raise RegistryConsistencyError(
                    "Profile updated before it was created",
                    {"identity": profile.identity},
                )
            loaded[profile.identity] = profile
            by_handle[profile.handle] = profile.identity
            roster.append(profile.identity)
            total_views += profile.view_count

        with self._lock:
            self._profiles = loaded
            self._identity_by_handle = by_handle
            self._handle_by_identity = {
                identity: profile.handle for identity, profile in loaded.items()
            }
            self._roster = roster
            self._total_profiles = len(roster)
            self._total_views = total_views

    def restore(self, snapshot: RegistrySnapshot) -> None:
        """Put the store back to the state captured by ``snapshot``."""
        self.load(snapshot.profiles[identity] for identity in snapshot.roster)

    # --- Lookups ---

    def has_profile(self, identity: str) -> bool:
        """Check whether ``identity`` owns a profile."""
        with self._lock:
            return identity in self._profiles

    def get_profile(self, identity: str) -> Profile:
        """Get a copy of the profile owned by ``identity``."""
        with self._lock:
            return replace(self._require(identity))

    def identity_for_handle(self, handle: str) -> str:
        """Resolve a handle to the identity that claimed it."""
        with self._lock:
            identity = self._identity_by_handle.get(handle)
            if identity is None:
                raise HandleNotFoundError(handle)
            return identity

    def get_profile_by_handle(self, handle: str) -> Profile:
        """Get a copy of the profile registered under ``handle``."""
        with self._lock:
            identity = self.identity_for_handle(handle)
            profile = self._profiles.get(identity)
            if profile is None or self._handle_by_identity.get(identity) != handle:
                raise RegistryConsistencyError(
                    "Handle index points to an identity without a matching profile",
                    {"handle": handle, "identity": identity},
                )
            return replace(profile)

    def snapshot(self) -> RegistrySnapshot:
        """Copy roster and profiles under one lock acquisition."""
        with self._lock:
            return RegistrySnapshot(
                roster=tuple(self._roster),
                profiles={identity: replace(p) for identity, p in self._profiles.items()},
            )

    def roster_size(self) -> int:
        """Number of identities that have ever created a profile."""
        with self._lock:
            return len(self._roster)

    @property
    def total_profiles(self) -> int:
        """Running profile count, bumped once per create."""
        with self._lock:
            return self._total_profiles

    @property
    def total_views(self) -> int:
        """Running view total, bumped once per recorded view."""
        with self._lock:
            return self._total_views

    # --- Internals ---

    def _require(self, identity: str) -> Profile:
        profile = self._profiles.get(identity)
        if profile is None:
            raise ProfileNotFoundError(identity)
        return profile

    def _replace_content(
        self, profile: Profile, content_pointer: str, privileged: bool
    ) -> ProfileEvent:
        now = self._clock()
        previous = profile.replace_content(content_pointer, now)
        return ProfileEvent(
            kind=EventKind.UPDATED,
            identity=profile.identity,
            payload={
                "previous_content_pointer": previous,
                "content_pointer": content_pointer,
                "privileged": privileged,
            },
            timestamp=profile.updated_at,
        )
