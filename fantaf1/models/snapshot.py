from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class SnapshotEntry(BaseModel):
    user_id: str
    name: Optional[str] = None
    position: int
    points: int
    jolly: int = 0


class RankingSnapshot(BaseModel):
    """Foto de la clasificación tomada después de un cálculo de puntos"""

    id: str  # snapshot_<timestamp>
    type: str  # race | championship
    race_id: Optional[str] = None
    created_at: datetime

    entries: list[SnapshotEntry]

    class Config:
        populate_by_name = True

    def position_of(self, user_id: str) -> Optional[int]:
        for entry in self.entries:
            if entry.user_id == user_id:
                return entry.position
        return None
