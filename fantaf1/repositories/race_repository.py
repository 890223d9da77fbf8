"""
🏁 RaceRepository - Gare y resultados oficiales

Una gara guarda el podio oficial embebido (official_results) y los flags
de cancelación a nivel de documento.
"""

from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from fantaf1.models.race import OfficialResult, Race


class RaceRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["races"]

    # ============================================
    # 📌 CREATE
    # ============================================

    async def create(self, race: Race) -> Race:
        """Inserta una gara del calendario"""
        try:
            await self.collection.insert_one(race.model_dump(by_alias=True))
            return race
        except DuplicateKeyError:
            raise ValueError(f"Race {race.id} already exists")

    # ============================================
    # 📌 READ
    # ============================================

    async def get_by_id(self, race_id: str) -> Optional[Race]:
        doc = await self.collection.find_one({"_id": race_id})
        return Race(**doc) if doc else None

    async def get_official_result(self, race_id: str) -> Optional[OfficialResult]:
        """
        Resultado oficial con los flags de cancelación de la gara aplicados.

        None si la gara no existe o todavía no tiene resultados.
        """
        race = await self.get_by_id(race_id)
        if race is None:
            return None
        return race.effective_result()

    async def get_last_round(self, season: int) -> Optional[int]:
        """Round más alto del calendario de una temporada"""
        doc = await self.collection.find_one(
            {"season": season},
            sort=[("round", -1)]
        )
        return doc["round"] if doc else None

    async def is_last_race(self, race_id: str) -> bool:
        """True si es la última gara de su temporada (puntos dobles)"""
        race = await self.get_by_id(race_id)
        if race is None:
            return False
        return race.round == await self.get_last_round(race.season)

    # ============================================
    # 📌 UPDATE
    # ============================================

    async def save_official_result(self, race_id: str, official: OfficialResult) -> bool:
        """Guarda (o sobrescribe) el podio oficial de una gara"""
        result = await self.collection.update_one(
            {"_id": race_id},
            {"$set": {"official_results": official.model_dump()}}
        )
        return result.matched_count > 0

    async def set_cancellation(
        self,
        race_id: str,
        cancelled_main: Optional[bool] = None,
        cancelled_sprint: Optional[bool] = None
    ) -> Optional[Race]:
        updates = {}
        if cancelled_main is not None:
            updates["cancelled_main"] = cancelled_main
        if cancelled_sprint is not None:
            updates["cancelled_sprint"] = cancelled_sprint

        if not updates:
            return await self.get_by_id(race_id)

        doc = await self.collection.find_one_and_update(
            {"_id": race_id},
            {"$set": updates},
            return_document=True
        )
        return Race(**doc) if doc else None
