"""
SnapshotService - Ranking history and position trend.

A snapshot is taken right after every scoring run; the leaderboard compares
the live standings against it to show who moved up or down.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from fantaf1.models.ranking import RankingEntry
from fantaf1.models.snapshot import RankingSnapshot, SnapshotEntry
from fantaf1.repositories.ranking_repository import RankingRepository
from fantaf1.repositories.snapshot_repository import SnapshotRepository

logger = logging.getLogger(__name__)


def rank_entries(entries: Iterable[RankingEntry]) -> list[SnapshotEntry]:
    """Order by total_points desc; ties keep input (arrival) order."""
    ordered = sorted(entries, key=lambda e: e.total_points, reverse=True)
    return [
        SnapshotEntry(
            user_id=entry.user_id,
            name=entry.name,
            position=position,
            points=entry.total_points,
            jolly=entry.jolly,
        )
        for position, entry in enumerate(ordered, start=1)
    ]


def position_delta(
    user_id: str,
    current_position: int,
    prior_snapshot: Optional[RankingSnapshot]
) -> int:
    """
    Positions gained (positive) or lost (negative) since prior_snapshot.

    0 when there is no prior snapshot or the user is a new entrant.
    """
    if prior_snapshot is None:
        return 0

    prior_position = prior_snapshot.position_of(user_id)
    if prior_position is None:
        return 0

    return prior_position - current_position


class SnapshotService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.ranking_repo = RankingRepository(db)
        self.snapshot_repo = SnapshotRepository(db)

    async def snapshot(self, snapshot_type: str = "race", race_id: Optional[str] = None) -> str:
        """Capture the current standings; returns the snapshot id."""
        entries = await self.ranking_repo.list_all()
        now = datetime.now(timezone.utc)
        snapshot_id = f"snapshot_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:6]}"

        snapshot = RankingSnapshot(
            id=snapshot_id,
            type=snapshot_type,
            race_id=race_id,
            created_at=now,
            entries=rank_entries(entries),
        )
        await self.snapshot_repo.append(snapshot)

        logger.info("Ranking snapshot saved: %s (%s, %d entries)", snapshot_id, snapshot_type, len(entries))
        return snapshot_id

    async def latest(self, offset: int = 0) -> Optional[RankingSnapshot]:
        return await self.snapshot_repo.get_latest(offset)

    async def get(self, snapshot_id: str) -> Optional[RankingSnapshot]:
        return await self.snapshot_repo.get_by_id(snapshot_id)
