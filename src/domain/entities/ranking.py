"""Read-only value objects produced by the ranking engine."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    """One row of the view-count leaderboard (rank starts at 1)."""

    rank: int
    identity: str
    handle: str
    view_count: int


@dataclass(frozen=True, slots=True)
class RegistryStats:
    """Registry-wide totals."""

    total_profiles: int
    total_views: int
