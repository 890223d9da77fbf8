"""
🎯 SubmissionRepository - Formaciones de los usuarios por gara

IDs compuestos: race_id:user_id
"""

from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from fantaf1.models.submission import Submission


def submission_id(race_id: str, user_id: str) -> str:
    return f"{race_id}:{user_id}"


class SubmissionRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["submissions"]

    async def create(self, submission: Submission) -> Submission:
        try:
            await self.collection.insert_one(submission.model_dump(by_alias=True))
            return submission
        except DuplicateKeyError:
            raise ValueError(f"Submission {submission.id} already exists")

    async def get(self, race_id: str, user_id: str) -> Optional[Submission]:
        doc = await self.collection.find_one({"_id": submission_id(race_id, user_id)})
        return Submission(**doc) if doc else None

    async def list_for_race(self, race_id: str) -> list[Submission]:
        """🔥 Todas las formaciones de una gara, en orden de llegada"""
        cursor = self.collection.find({"race_id": race_id})
        docs = await cursor.to_list(length=None)
        return [Submission(**doc) for doc in docs]

    async def write_points(
        self,
        race_id: str,
        user_id: str,
        main_pts: int,
        sprint_pts: int
    ) -> bool:
        """Cachea en la formación los puntos calculados"""
        result = await self.collection.update_one(
            {"_id": submission_id(race_id, user_id)},
            {
                "$set": {
                    "points_earned": main_pts,
                    "points_earned_sprint": sprint_pts
                }
            }
        )
        return result.matched_count > 0
