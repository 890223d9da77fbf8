"""
ChampionshipRepository - Resultado final del campeonato (documento único)
"""

from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from fantaf1.models.race import ChampionshipResult

RESULTS_ID = "results"


class ChampionshipRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["championship"]

    async def get_result(self) -> Optional[ChampionshipResult]:
        doc = await self.collection.find_one({"_id": RESULTS_ID})
        return ChampionshipResult(**doc) if doc else None

    async def save_result(self, result: ChampionshipResult) -> None:
        await self.collection.update_one(
            {"_id": RESULTS_ID},
            {"$set": result.model_dump()},
            upsert=True
        )
