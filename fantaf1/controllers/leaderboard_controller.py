"""
Controlador de leaderboards - Clasificación con tendencia de posiciones
"""

from fastapi import APIRouter, HTTPException, Query, status

from fantaf1.core.dependencies import Database
from fantaf1.models.leaderboard import LeaderboardEntry
from fantaf1.models.snapshot import RankingSnapshot
from fantaf1.services.leaderboard_service import (
    LeaderboardNotFoundError,
    LeaderboardService,
)
from fantaf1.services.snapshot_service import SnapshotService


router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=list[LeaderboardEntry])
async def get_leaderboard(
    db: Database,
    limit: int = Query(100, ge=1, le=500)
):
    """
    Obtener la clasificación actual.

    position_delta compara con el snapshot anterior al último cálculo.
    """
    return await LeaderboardService(db).get_leaderboard(limit)


@router.get("/users/{user_id}", response_model=LeaderboardEntry)
async def get_user_position(user_id: str, db: Database):
    """Posición de un usuario en la clasificación"""
    try:
        return await LeaderboardService(db).get_user_position(user_id)
    except LeaderboardNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.get("/snapshots/{snapshot_id}", response_model=RankingSnapshot)
async def get_snapshot(snapshot_id: str, db: Database):
    """Foto de la clasificación guardada tras un cálculo (por su id)"""
    snapshot = await SnapshotService(db).get(snapshot_id)
    if snapshot is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Snapshot {snapshot_id} not found"
        )
    return snapshot
