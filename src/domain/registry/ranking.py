"""Read-only listings, leaderboard and stats over the profile store.

Every call works on one store snapshot, so results are consistent even while
writers are active. Listing is a roster slice; ranking and stats walk the
whole roster: an O(n) copy, plus an O(n log n) sort for ranking.
"""

from core.exceptions import LimitOutOfRangeError, OffsetOutOfRangeError
from domain.entities.ranking import LeaderboardEntry, RegistryStats
from domain.registry.profile_store import ProfileStore


class RankingEngine:
    """Query side of the registry."""

    def __init__(self, store: ProfileStore) -> None:
        self._store = store

    def list_identities(self, offset: int, limit: int) -> list[str]:
        """Return up to ``limit`` identities from ``offset`` in creation order.

        An offset past the end of the roster is an error, except that an
        empty roster paged from 0 yields an empty list.
        """
        roster = self._store.snapshot().roster
        if offset < 0:
            raise OffsetOutOfRangeError(offset, len(roster))
        if limit < 0:
            raise LimitOutOfRangeError(limit, len(roster))
        if not roster and offset == 0:
            return []
        if offset >= len(roster):
            raise OffsetOutOfRangeError(offset, len(roster))
        return list(roster[offset : offset + limit])

    def top_profiles(self, limit: int) -> list[LeaderboardEntry]:
        """Return the ``limit`` most viewed profiles.

        Equal view counts keep creation order, so the result is the same on
        every call against unchanged state.
        """
        snapshot = self._store.snapshot()
        if limit < 0 or limit > len(snapshot.roster):
            raise LimitOutOfRangeError(limit, len(snapshot.roster))

        # sorted() is stable and the roster is in creation order
        ranked = sorted(
            snapshot.roster,
            key=lambda identity: snapshot.profiles[identity].view_count,
            reverse=True,
        )
        return [
            LeaderboardEntry(
                rank=position,
                identity=identity,
                handle=snapshot.profiles[identity].handle,
                view_count=snapshot.profiles[identity].view_count,
            )
            for position, identity in enumerate(ranked[:limit], start=1)
        ]

    def stats(self) -> RegistryStats:
        """Count profiles and sum view counts from a fresh snapshot."""
        snapshot = self._store.snapshot()
        return RegistryStats(
            total_profiles=len(snapshot.roster),
            total_views=sum(snapshot.profiles[identity].view_count for identity in snapshot.roster),
        )
