"""
SnapshotRepository - Historial de la clasificación (solo inserción)
"""

from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from fantaf1.models.snapshot import RankingSnapshot


class SnapshotRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["ranking_history"]

    async def append(self, snapshot: RankingSnapshot) -> str:
        """Inserta un snapshot; nunca se modifican ni se borran"""
        await self.collection.insert_one(snapshot.model_dump())
        return snapshot.id

    async def get_latest(self, offset: int = 0) -> Optional[RankingSnapshot]:
        """
        Snapshot más reciente (offset=0) o anteriores (offset=1, 2...)

        _id desempata snapshots creados en el mismo milisegundo.
        """
        cursor = self.collection.find({}).sort([
            ("created_at", -1),
            ("_id", -1)
        ]).skip(offset).limit(1)
        docs = await cursor.to_list(length=1)
        return RankingSnapshot(**docs[0]) if docs else None

    async def get_by_id(self, snapshot_id: str) -> Optional[RankingSnapshot]:
        doc = await self.collection.find_one({"id": snapshot_id})
        return RankingSnapshot(**doc) if doc else None
