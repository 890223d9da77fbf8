"""
Controlador de Admin - Guardar resultados oficiales y lanzar el cálculo de puntos
"""

from typing import Annotated, Optional

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from fantaf1.core.dependencies import Database, Points, ResultsFeed
from fantaf1.core.exceptions import (
    IllegalStateError,
    PartialFailureError,
    PreconditionError,
    RaceNotFoundError,
)
from fantaf1.models.race import ChampionshipResult, OfficialResult, Race
from fantaf1.models.ranking import RankingEntry
from fantaf1.models.scoring import ScoringReport, SubmissionBreakdown
from fantaf1.repositories.race_repository import RaceRepository
from fantaf1.repositories.ranking_repository import RankingRepository
from fantaf1.services.driver_resolver import DriverResolver
from fantaf1.services.ledger_service import LedgerService
from fantaf1.services.results_feed import (
    FeedRaceResult,
    ResultsFeedError,
    ResultsFeedTimeoutError,
)


router = APIRouter(prefix="/admin", tags=["admin"])


# ============================================
# REQUEST / RESPONSE SCHEMAS
# ============================================

class OfficialResultRequest(BaseModel):
    """Request para registrar el podio oficial de una gara"""
    p1: Optional[str] = None
    p2: Optional[str] = None
    p3: Optional[str] = None
    sp1: Optional[str] = None  # Solo si hubo sprint
    sp2: Optional[str] = None
    sp3: Optional[str] = None
    double_points: Optional[bool] = None  # None = se deduce (última gara de la temporada)


class CancellationRequest(BaseModel):
    """Request para marcar gara o sprint como cancelada"""
    cancelled_main: Optional[bool] = None
    cancelled_sprint: Optional[bool] = None


class ChampionshipResultRequest(BaseModel):
    """Request para registrar el top 3 final de pilotos y constructores"""
    p1: Optional[str] = None
    p2: Optional[str] = None
    p3: Optional[str] = None
    c1: Optional[str] = None
    c2: Optional[str] = None
    c3: Optional[str] = None


PickName = Annotated[str, Field(min_length=1)]


class ChampionshipPicksRequest(BaseModel):
    """Request para guardar el top 3 de pretemporada de un usuario (en orden)"""
    drivers: list[PickName] = Field(default_factory=list, max_length=3)
    constructors: list[PickName] = Field(default_factory=list, max_length=3)


class ScoringResponse(BaseModel):
    success: bool
    message: str
    processed: int
    updated: int
    failed_user_ids: list[str]
    snapshot_id: Optional[str] = None


def _scoring_response(report: ScoringReport) -> ScoringResponse:
    return ScoringResponse(
        success=report.succeeded,
        message=report.message,
        processed=report.processed,
        updated=report.updated,
        failed_user_ids=report.failed_user_ids,
        snapshot_id=report.snapshot_id
    )


async def _run_scoring(coro) -> ScoringResponse | JSONResponse:
    """Traduce las excepciones del motor a respuestas HTTP"""
    try:
        report = await coro
        report.raise_for_failures()
    except RaceNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except PreconditionError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )
    except IllegalStateError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except PartialFailureError as e:
        # Éxito parcial: los usuarios fallidos se pueden reintentar
        return JSONResponse(
            status_code=status.HTTP_207_MULTI_STATUS,
            content=_scoring_response(e.report).model_dump()
        )

    return _scoring_response(report)


# ============================================
# RACE RESULT ENDPOINTS
# ============================================

@router.put("/races/{race_id}/results", response_model=ScoringResponse)
async def save_race_results(
    race_id: str,
    request: OfficialResultRequest,
    db: Database,
    points: Points
):
    """
    Registrar el resultado oficial de una gara y calcular puntos.

    Esto:
    1. Guarda el podio oficial (y sprint)
    2. Calcula los puntos de todas las formaciones
    3. Reconcilia el ledger de cada usuario (se puede repetir sin duplicar)
    4. Guarda un snapshot de la clasificación
    """
    double_points = request.double_points
    if double_points is None:
        double_points = await RaceRepository(db).is_last_race(race_id)

    official = OfficialResult(
        p1=request.p1,
        p2=request.p2,
        p3=request.p3,
        sp1=request.sp1,
        sp2=request.sp2,
        sp3=request.sp3,
        double_points=double_points
    )

    return await _run_scoring(points.calculate_points_for_race(race_id, official))


@router.post("/races/{race_id}/score", response_model=ScoringResponse)
async def rescore_race(race_id: str, points: Points):
    """
    Recalcular los puntos de una gara con el resultado ya guardado.
    Idempotente: si nada cambió, los totales no se mueven.
    """
    return await _run_scoring(points.calculate_points_for_race(race_id))


@router.put("/races/{race_id}/cancellation")
async def update_race_cancellation(
    race_id: str,
    request: CancellationRequest,
    db: Database
):
    """
    Marcar gara principal o sprint como cancelada.
    Una gara cancelada no se puede puntuar; una sprint cancelada vale 0.
    """
    race = await RaceRepository(db).set_cancellation(
        race_id,
        cancelled_main=request.cancelled_main,
        cancelled_sprint=request.cancelled_sprint
    )
    if race is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Race {race_id} not found"
        )

    return {
        "success": True,
        "race_id": race.id,
        "cancelled_main": race.cancelled_main,
        "cancelled_sprint": race.cancelled_sprint
    }


@router.get("/races/{race_id}/submissions", response_model=list[SubmissionBreakdown])
async def get_race_submissions(race_id: str, points: Points):
    """
    Tabla de resultados de una gara: puntos por casilla de cada formación
    contra el resultado oficial guardado.
    """
    try:
        return await points.get_race_breakdown(race_id)
    except RaceNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except PreconditionError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )
    except IllegalStateError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )


# ============================================
# RESULTS FEED ENDPOINTS
# ============================================

async def _call_feed(coro):
    """Traduce los errores del feed a 502/504"""
    try:
        return await coro
    except ResultsFeedTimeoutError as e:
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail=str(e)
        )
    except ResultsFeedError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e)
        )


async def _get_race_or_404(db, race_id: str) -> Race:
    race = await RaceRepository(db).get_by_id(race_id)
    if race is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Race {race_id} not found"
        )
    return race


@router.get("/races/{race_id}/feed-results", response_model=FeedRaceResult)
async def fetch_feed_results(
    race_id: str,
    db: Database,
    feed: ResultsFeed,
    season: Optional[int] = Query(None, description="Temporada; por defecto la de la gara"),
    round: Optional[int] = Query(None, description="Round; por defecto el de la gara")
):
    """
    Obtener el podio del feed de resultados para revisarlo antes de guardarlo.
    No guarda nada.
    """
    if season is None or round is None:
        race = await _get_race_or_404(db, race_id)
        season = season if season is not None else race.season
        round = round if round is not None else race.round

    result = await _call_feed(feed.fetch_race_results(season, round))

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No results yet for {season} round {round}"
        )

    return result


@router.get("/races/{race_id}/feed-status")
async def get_feed_status(race_id: str, db: Database, feed: ResultsFeed):
    """¿Tiene ya el feed el podio de esta gara?"""
    race = await _get_race_or_404(db, race_id)

    return {
        "race_id": race.id,
        "season": race.season,
        "round": race.round,
        "available": await feed.results_available(race.season, race.round)
    }


@router.put("/races/{race_id}/results/from-feed", response_model=ScoringResponse)
async def import_feed_results(
    race_id: str,
    db: Database,
    feed: ResultsFeed,
    points: Points
):
    """
    Importar el podio del feed como resultado oficial y calcular puntos.
    Los puntos dobles se deducen (última gara de la temporada).
    """
    race = await _get_race_or_404(db, race_id)

    result = await _call_feed(feed.fetch_race_results(race.season, race.round))
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No results yet for {race.season} round {race.round}"
        )

    double_points = await RaceRepository(db).is_last_race(race_id)
    official = result.to_official_result(double_points)

    return await _run_scoring(points.calculate_points_for_race(race_id, official))


@router.get("/feed/last-race", response_model=FeedRaceResult)
async def fetch_last_race_results(feed: ResultsFeed):
    """Podio de la última gara disputada según el feed (no guarda nada)"""
    result = await _call_feed(feed.fetch_last_race_results())

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No race results published yet this season"
        )

    return result


# ============================================
# CHAMPIONSHIP ENDPOINTS
# ============================================

@router.put("/championship/results", response_model=ScoringResponse)
async def save_championship_results(
    request: ChampionshipResultRequest,
    points: Points
):
    """
    Registrar el top 3 final del campeonato y calcular los puntos de campeonato.
    """
    result = ChampionshipResult(**request.model_dump())
    return await _run_scoring(points.calculate_championship_points(result))


@router.put("/users/{user_id}/championship-picks", response_model=RankingEntry)
async def set_championship_picks(
    user_id: str,
    request: ChampionshipPicksRequest,
    db: Database
):
    """
    Guardar el top 3 de pretemporada de un usuario (pilotos y constructores).
    Los nombres se normalizan contra la parrilla.
    """
    resolver = DriverResolver()
    drivers = [resolver.resolve_driver(name) for name in request.drivers]
    constructors = [resolver.resolve_constructor(name) for name in request.constructors]

    return await RankingRepository(db).set_championship_picks(user_id, drivers, constructors)


# ============================================
# LEDGER AUDIT
# ============================================

@router.get("/ledger/audit")
async def audit_ledger(db: Database):
    """
    Usuarios cuyo total no coincide con la suma de su ledger.
    Útil cuando se detectan inconsistencias.
    """
    broken = await LedgerService(db).audit()
    return {
        "consistent": not broken,
        "user_ids": broken
    }
