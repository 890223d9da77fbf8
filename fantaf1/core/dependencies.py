"""
Dependencies de FastAPI para inyeccion de BD y servicios
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from fantaf1.core.config import Settings, get_settings
from fantaf1.database import get_database
from fantaf1.services.driver_resolver import DriverResolver
from fantaf1.services.points_service import PointsService
from fantaf1.services.results_feed import ResultsFeedClient


def get_points_service(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)],
    settings: Annotated[Settings, Depends(get_settings)]
) -> PointsService:
    """PointsService configurado con los límites de concurrencia y reintentos"""
    return PointsService(
        db,
        max_concurrency=settings.scoring_max_concurrency,
        max_retries=settings.ledger_max_retries
    )


async def get_results_feed(
    settings: Annotated[Settings, Depends(get_settings)]
) -> AsyncGenerator[ResultsFeedClient, None]:
    """Cliente del feed de resultados; se cierra al terminar el request"""
    client = ResultsFeedClient(
        DriverResolver(),
        base_url=settings.results_feed_base_url,
        timeout=settings.results_feed_timeout
    )
    try:
        yield client
    finally:
        await client.close()


# Alias de tipos para que se vea mas limpio en los endpoints
Database = Annotated[AsyncIOMotorDatabase, Depends(get_database)]
Points = Annotated[PointsService, Depends(get_points_service)]
ResultsFeed = Annotated[ResultsFeedClient, Depends(get_results_feed)]
