"""
Fixtures for integration tests
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from fantaf1.core.dependencies import get_results_feed
from fantaf1.database import Database
from fantaf1.main import app
from fantaf1.services.driver_resolver import DriverResolver
from fantaf1.services.results_feed import ResultsFeedClient


def _race_payload(key: str, rows: list[tuple[str, str]]) -> dict:
    race = {
        "season": "2025",
        "round": "5",
        "raceName": "Miami Grand Prix",
        "date": "2025-05-04",
        key: [{"Driver": {"givenName": g, "familyName": f}} for g, f in rows],
    }
    return {"MRData": {"RaceTable": {"Races": [race]}}}


def feed_handler(request: httpx.Request) -> httpx.Response:
    """Fake results feed: Miami 2025 with sprint, nothing else published."""
    path = request.url.path
    if path.endswith("/2025/5/results.json") or path.endswith("/current/last/results.json"):
        return httpx.Response(200, json=_race_payload(
            "Results", [("Oscar", "Piastri"), ("Lando", "Norris"), ("George", "Russell")]
        ))
    if path.endswith("/2025/5/sprint.json"):
        return httpx.Response(200, json=_race_payload(
            "SprintResults", [("Lando", "Norris"), ("Oscar", "Piastri"), ("Lewis", "Hamilton")]
        ))
    if path.endswith("/2025/9/results.json"):
        return httpx.Response(503, text="Service Unavailable")
    return httpx.Response(200, json={"MRData": {"RaceTable": {"Races": []}}})


@pytest.fixture
async def client(test_db):
    """
    HTTP client for testing API endpoints.

    Points Database at the in-memory test database and replaces the
    results feed with a mocked transport.
    """
    original_db = Database.db
    Database.db = test_db

    async def override_results_feed():
        http = AsyncClient(
            base_url="https://feed.test/ergast/f1",
            transport=httpx.MockTransport(feed_handler)
        )
        feed = ResultsFeedClient(DriverResolver(), client=http)
        try:
            yield feed
        finally:
            await feed.close()

    app.dependency_overrides[get_results_feed] = override_results_feed

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    Database.db = original_db
