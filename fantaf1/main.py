"""
Entry point de la API
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware

from fantaf1.core.config import get_settings
from fantaf1.database import Database

from fantaf1.controllers.admin_controller import router as admin_router
from fantaf1.controllers.leaderboard_controller import router as leaderboard_router
from fantaf1.controllers.health_controller import router as health_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)

# Parse CORS origins
CORS_ORIGINS = [origin.strip() for origin in settings.cors_origins.split(",")]


def is_allowed_origin(origin: str) -> bool:
    """Check if origin is in the explicit allow list."""
    return bool(origin) and origin in CORS_ORIGINS


class CORSMiddleware(BaseHTTPMiddleware):
    """
    CORS middleware that answers OPTIONS preflight before routing.
    """

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin", "")

        if request.method == "OPTIONS":
            if is_allowed_origin(origin):
                return Response(
                    status_code=200,
                    headers={
                        "Access-Control-Allow-Origin": origin,
                        "Access-Control-Allow-Methods": "GET, POST, PUT, OPTIONS",
                        "Access-Control-Allow-Headers": "Content-Type, Accept, Origin",
                        "Access-Control-Max-Age": "86400",  # Cache preflight for 24 hours
                    }
                )
            return Response(status_code=403, content="Origin not allowed")

        response = await call_next(request)

        if is_allowed_origin(origin):
            response.headers["Access-Control-Allow-Origin"] = origin

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    await Database.connect()
    yield
    await Database.disconnect()

# Creo la app
app = FastAPI(
    title="Fanta F1 API",
    description="Backend de puntos del fantasy de Fórmula 1",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(CORSMiddleware)

# Agrego todos los routers de los controllers al app
app.include_router(health_router)
app.include_router(admin_router)
app.include_router(leaderboard_router)


@app.get("/")
async def root():
    # Endpoint raíz, sirve para verificar que la API está levantada
    return {
        "name": "Fanta F1 API",
        "version": "1.0.0",
        "docs": "/docs"
    }
