"""
🏆 RankingRepository - Clasificación y ledger de puntos por usuario

Cada documento es la entrada de un usuario (_id = user_id). El ledger
(points_by_race + campos de campeonato) se actualiza con compare-and-swap
sobre ledger_version para que dos cálculos concurrentes no pisen el
valor previo.
"""

from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from fantaf1.core.constants import CHAMPIONSHIP_KEY
from fantaf1.models.ranking import LedgerLine, RankingEntry


def _version_filter(user_id: str, expected_version: int) -> dict:
    # Documentos antiguos (seed) pueden no tener ledger_version todavía
    if expected_version == 0:
        return {
            "_id": user_id,
            "$or": [
                {"ledger_version": 0},
                {"ledger_version": {"$exists": False}},
            ]
        }
    return {"_id": user_id, "ledger_version": expected_version}


class RankingRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["ranking"]

    # ============================================
    # 📌 CREATE
    # ============================================

    async def create(self, entry: RankingEntry) -> RankingEntry:
        try:
            await self.collection.insert_one(entry.model_dump(by_alias=True))
            return entry
        except DuplicateKeyError:
            raise ValueError(f"Ranking entry {entry.user_id} already exists")

    async def get_or_create(self, user_id: str) -> RankingEntry:
        """Entrada del usuario; la crea vacía la primera vez que puntúa"""
        entry = await self.get_by_user(user_id)
        if entry is not None:
            return entry

        try:
            await self.collection.insert_one(
                RankingEntry(_id=user_id).model_dump(by_alias=True)
            )
        except DuplicateKeyError:
            # Otro cálculo la creó entre medias
            pass

        return await self.get_by_user(user_id)

    # ============================================
    # 📌 READ
    # ============================================

    async def get_by_user(self, user_id: str) -> Optional[RankingEntry]:
        doc = await self.collection.find_one({"_id": user_id})
        return RankingEntry(**doc) if doc else None

    async def list_all(self) -> list[RankingEntry]:
        """Todas las entradas en orden de llegada (natural)"""
        cursor = self.collection.find({})
        docs = await cursor.to_list(length=None)
        return [RankingEntry(**doc) for doc in docs]

    # ============================================
    # 📌 UPDATE
    # ============================================

    async def compare_and_set_ledger(
        self,
        user_id: str,
        expected_version: int,
        key: str,
        line: LedgerLine,
        points_delta: int,
        jolly_delta: int
    ) -> Optional[RankingEntry]:
        """
        🔥 Escribe la línea del ledger y aplica los deltas en una sola operación

        Solo se aplica si ledger_version sigue siendo expected_version.
        Retorna la entrada actualizada, o None si otro cálculo se adelantó.
        """
        if key == CHAMPIONSHIP_KEY:
            line_fields = {
                "championship_pts": line.total,
                "championship_jolly": line.jolly_granted,
            }
        else:
            line_fields = {f"points_by_race.{key}": line.model_dump()}

        doc = await self.collection.find_one_and_update(
            _version_filter(user_id, expected_version),
            {
                "$set": line_fields,
                "$inc": {
                    "total_points": points_delta,
                    "jolly": jolly_delta,
                    "ledger_version": 1
                }
            },
            return_document=True
        )
        return RankingEntry(**doc) if doc else None

    async def set_championship_picks(
        self,
        user_id: str,
        drivers: list[str],
        constructors: list[str]
    ) -> RankingEntry:
        """Guarda el top 3 de pretemporada (pilotos y constructores)"""
        await self.get_or_create(user_id)
        doc = await self.collection.find_one_and_update(
            {"_id": user_id},
            {
                "$set": {
                    "championship_drivers": drivers,
                    "championship_constructors": constructors
                }
            },
            return_document=True
        )
        return RankingEntry(**doc)
