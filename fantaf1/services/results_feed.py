"""
ResultsFeedClient - Top 3 finishers from the Jolpica F1 API (Ergast replacement).

The scoring engine never calls this: the admin fetches a proposed podium,
reviews it and then saves it as the official result.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import BaseModel

from fantaf1.models.race import OfficialResult
from fantaf1.services.driver_resolver import DriverResolver

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.jolpi.ca/ergast/f1"
DEFAULT_TIMEOUT = 15.0


class ResultsFeedError(Exception):
    """Base exception for results feed errors."""
    pass


class ResultsFeedConnectionError(ResultsFeedError):
    """Raised when the feed cannot be reached."""
    pass


class ResultsFeedTimeoutError(ResultsFeedError):
    """Raised when a request to the feed times out."""
    pass


class ResultsFeedAPIError(ResultsFeedError):
    """Raised when the feed answers with 4xx/5xx."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class FeedRaceResult(BaseModel):
    """Podio de una gara tal como llega del feed, ya con nombres de la parrilla"""

    season: int
    round: int
    race_name: Optional[str] = None
    date: Optional[str] = None

    main: list[Optional[str]]
    sprint: Optional[list[Optional[str]]] = None

    def to_official_result(self, double_points: bool = False) -> OfficialResult:
        sprint = self.sprint or [None, None, None]
        return OfficialResult(
            p1=self.main[0],
            p2=self.main[1],
            p3=self.main[2],
            sp1=sprint[0],
            sp2=sprint[1],
            sp3=sprint[2],
            double_points=double_points,
        )


class ResultsFeedClient:
    def __init__(
        self,
        resolver: DriverResolver,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.resolver = resolver
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ResultsFeedClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get(self, endpoint: str) -> dict[str, Any]:
        try:
            response = await self._client.get(endpoint)
        except httpx.ConnectError as exc:
            raise ResultsFeedConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise ResultsFeedTimeoutError(str(exc)) from exc

        if response.status_code >= 400:
            raise ResultsFeedAPIError(response.status_code, response.text)
        return response.json()

    @staticmethod
    def _first_race(payload: dict[str, Any]) -> Optional[dict[str, Any]]:
        races = payload.get("MRData", {}).get("RaceTable", {}).get("Races") or []
        return races[0] if races else None

    def _top3(self, rows: list[dict[str, Any]]) -> Optional[list[Optional[str]]]:
        if len(rows) < 3:
            return None
        podium = []
        for row in rows[:3]:
            driver = row.get("Driver") or {}
            full_name = f"{driver.get('givenName', '')} {driver.get('familyName', '')}".strip()
            podium.append(self.resolver.resolve_driver(full_name, driver.get("familyName")))
        return podium

    async def fetch_race_results(self, season: int | str, round: int | str) -> Optional[FeedRaceResult]:
        """
        Podio principal (y sprint, si se corrió) de una gara.

        Returns None si el feed todavía no tiene los resultados.
        """
        logger.info("Fetching results for %s round %s", season, round)

        race = self._first_race(await self._get(f"/{season}/{round}/results.json"))
        if race is None:
            logger.warning("No results yet for %s round %s", season, round)
            return None

        main = self._top3(race.get("Results") or [])
        if main is None:
            return None

        sprint = None
        try:
            sprint_race = self._first_race(await self._get(f"/{season}/{round}/sprint.json"))
        except ResultsFeedAPIError:
            sprint_race = None
        if sprint_race is not None:
            sprint = self._top3(sprint_race.get("SprintResults") or [])

        return FeedRaceResult(
            season=int(race.get("season", season)),
            round=int(race.get("round", round)),
            race_name=race.get("raceName"),
            date=race.get("date"),
            main=main,
            sprint=sprint,
        )

    async def fetch_last_race_results(self) -> Optional[FeedRaceResult]:
        """Resultados de la última gara disputada de la temporada actual"""
        race = self._first_race(await self._get("/current/last/results.json"))
        if race is None:
            return None
        return await self.fetch_race_results(race["season"], race["round"])

    async def results_available(self, season: int | str, round: int | str) -> bool:
        try:
            race = self._first_race(await self._get(f"/{season}/{round}/results.json"))
        except ResultsFeedError:
            return False
        return race is not None and len(race.get("Results") or []) >= 3
