"""
Platform Database Access

Owns the MongoDB client lifecycle and exposes the platform database to
routers through a FastAPI dependency.
"""

from fastapi import HTTPException, Request, status
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from structlog import get_logger

from ..config import PlatformConfig

logger = get_logger()


def connect(platform_config: PlatformConfig) -> tuple[AsyncIOMotorClient, AsyncIOMotorDatabase]:
    """
    Open the MongoDB client.

    Args:
        platform_config: Platform configuration

    Returns:
        Tuple of (client, platform database)
    """
    client = AsyncIOMotorClient(platform_config.mongo_db_url)
    return client, client[platform_config.mongo_db_name]


async def initialize_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Create indexes for every collection.

    Runs once during application startup, before any request is served.

    Args:
        db: Platform database
    """
    # Imported here to keep model modules free of database wiring
    from ..batches.db_service import BatchDBService
    from ..enrollment.db_service import UserDBService
    from ..tenant_management.db_service import InstituteDBService

    await InstituteDBService(db).ensure_indexes()
    await BatchDBService(db).ensure_indexes()
    await UserDBService(db).ensure_indexes()

    logger.info("database_indexes_ready", database=db.name)


def get_platform_db(request: Request) -> AsyncIOMotorDatabase:
    """Dependency to get the platform database opened by the app lifespan."""
    db = getattr(request.app.state, "platform_db", None)
    if db is None:
        logger.error("platform_db_not_initialized")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not available",
        )
    return db
