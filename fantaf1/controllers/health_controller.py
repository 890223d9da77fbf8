"""
Controlador de salud - Endpoint de comprobación del servicio
"""

from fastapi import APIRouter
from pydantic import BaseModel

from fantaf1.core.config import get_settings
from fantaf1.database import Database


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Respuesta del chequeo de estado."""
    status: str
    database: str
    environment: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Comprueba que la API esté levantada y si la base de datos está conectada.
    """
    db_status = "connected" if Database.db is not None else "disconnected"

    return HealthResponse(
        status="ok",
        database=db_status,
        environment=get_settings().app_env
    )
