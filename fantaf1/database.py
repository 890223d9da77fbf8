"""
🔌 Database Connection Setup - MongoDB

Configuración centralizada para conectar a MongoDB
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from fantaf1.core.config import get_settings

logger = logging.getLogger(__name__)


class Database:
    """Singleton para la conexión a MongoDB"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls):
        """Conecta a MongoDB"""
        if cls.client is None:
            settings = get_settings()

            cls.client = AsyncIOMotorClient(
                settings.mongodb_uri,
                maxPoolSize=10,
                minPoolSize=2,
            )
            cls.db = cls.client[settings.mongodb_db_name]

            # Test de conexión
            await cls.client.admin.command("ping")
            logger.info("✅ Connected to MongoDB: %s", settings.mongodb_db_name)

    @classmethod
    async def disconnect(cls):
        """Cierra la conexión"""
        if cls.client is not None:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("❌ Disconnected from MongoDB")

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        """Retorna la instancia de la base de datos"""
        if cls.db is None:
            raise RuntimeError("Database not connected. Call Database.connect() first.")
        return cls.db


# ============================================
# 🎯 DEPENDENCY para FastAPI
# ============================================

async def get_database() -> AsyncIOMotorDatabase:
    """FastAPI dependency para inyectar la DB"""
    return Database.get_db()


# ============================================
# 🏗️ CREAR ÍNDICES (run once al deployment)
# ============================================

async def create_indexes(db: Optional[AsyncIOMotorDatabase] = None):
    """
    Crea los índices necesarios para optimizar queries

    Llamar una vez al hacer deploy o en un script de inicialización
    """
    db = db if db is not None else Database.get_db()

    # Índices para races
    await db.races.create_index([("season", 1), ("round", 1)], unique=True)

    # Índices para submissions
    await db.submissions.create_index([("race_id", 1), ("user_id", 1)], unique=True)
    await db.submissions.create_index("user_id")

    # Índices para ranking
    await db.ranking.create_index([("total_points", -1)])

    # Índices para ranking_history
    await db.ranking_history.create_index("id", unique=True)
    await db.ranking_history.create_index([("created_at", -1)])

    logger.info("✅ Indexes created successfully")
