"""
Pytest fixtures and configuration for all tests.
"""

import os

# Settings() necesita MONGODB_URI antes de importar fantaf1.main
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")

import pytest
from typing import AsyncGenerator
from mongomock_motor import AsyncMongoMockClient
from motor.motor_asyncio import AsyncIOMotorDatabase

TEST_DB_NAME = "fanta_f1_test"


@pytest.fixture(scope="function")
async def test_db() -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """
    Provide a clean in-memory test database for each test.

    Automatically cleans up after each test.
    """
    client = AsyncMongoMockClient()
    db = client[TEST_DB_NAME]

    yield db

    # Cleanup: drop all collections after test
    collection_names = await db.list_collection_names()
    for collection_name in collection_names:
        await db[collection_name].drop()


@pytest.fixture
def sample_race_data():
    """Sample race data for testing (round 5 of a 24-round season)."""
    return {
        "_id": "2025-05-miami",
        "season": 2025,
        "round": 5,
        "name": "Miami Grand Prix",
        "cancelled_main": False,
        "cancelled_sprint": False,
        "official_results": None
    }


@pytest.fixture
def sample_official_result():
    """Sample official result with sprint."""
    return {
        "p1": "Oscar Piastri",
        "p2": "Lando Norris",
        "p3": "George Russell",
        "sp1": "Lando Norris",
        "sp2": "Oscar Piastri",
        "sp3": "Lewis Hamilton",
        "double_points": False
    }


@pytest.fixture
def make_submission():
    """Factory for submission documents."""
    def _make(race_id: str, user_id: str, **fields):
        doc = {
            "_id": f"{race_id}:{user_id}",
            "race_id": race_id,
            "user_id": user_id,
            "is_late": False,
        }
        doc.update(fields)
        return doc
    return _make


@pytest.fixture
async def seeded_race(test_db, sample_race_data):
    """Insert the sample race and the last race of the season."""
    await test_db["races"].insert_many([
        sample_race_data,
        {
            "_id": "2025-24-abu-dhabi",
            "season": 2025,
            "round": 24,
            "name": "Abu Dhabi Grand Prix",
            "cancelled_main": False,
            "cancelled_sprint": False,
            "official_results": None
        }
    ])
    return sample_race_data
