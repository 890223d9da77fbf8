"""
LeaderboardService - Current standings with position trend.

The trend compares the live order against the snapshot taken before the
latest scoring run (the latest snapshot is the capture of that run itself).
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from fantaf1.models.leaderboard import LeaderboardEntry
from fantaf1.models.snapshot import RankingSnapshot
from fantaf1.repositories.ranking_repository import RankingRepository
from fantaf1.repositories.snapshot_repository import SnapshotRepository
from fantaf1.services.snapshot_service import position_delta, rank_entries


class LeaderboardServiceError(Exception):
    """Base exception for leaderboard service errors."""
    pass


class LeaderboardNotFoundError(LeaderboardServiceError):
    """Raised when leaderboard data is not found."""
    pass


class LeaderboardService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.ranking_repo = RankingRepository(db)
        self.snapshot_repo = SnapshotRepository(db)

    async def _prior_snapshot(self) -> Optional[RankingSnapshot]:
        return await self.snapshot_repo.get_latest(offset=1)

    async def get_leaderboard(self, limit: int = 100) -> list[LeaderboardEntry]:
        """Standings ordered by total points, with position delta."""
        entries = await self.ranking_repo.list_all()
        prior = await self._prior_snapshot()

        entries_by_user = {entry.user_id: entry for entry in entries}

        leaderboard = []
        for ranked in rank_entries(entries):
            entry = entries_by_user[ranked.user_id]
            leaderboard.append(LeaderboardEntry(
                user_id=ranked.user_id,
                name=ranked.name,
                position=ranked.position,
                total_points=ranked.points,
                jolly=ranked.jolly,
                championship_pts=entry.championship_pts,
                position_delta=position_delta(ranked.user_id, ranked.position, prior),
            ))

        return leaderboard[:limit]

    async def get_user_position(self, user_id: str) -> LeaderboardEntry:
        """
        Get user's position in the leaderboard.

        Raises LeaderboardNotFoundError if the user has no ranking entry.
        """
        for entry in await self.get_leaderboard(limit=10_000):
            if entry.user_id == user_id:
                return entry
        raise LeaderboardNotFoundError(f"User {user_id} not in leaderboard")
