"""
Institute Dependencies

FastAPI dependencies for the institute directory and header-scoped institute lookup.
"""

from typing import Optional

from fastapi import Depends, Header
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..shared_services.database import get_platform_db
from .directory import InstituteDirectory
from .models import Institute


def get_institute_directory(
    db: AsyncIOMotorDatabase = Depends(get_platform_db),
) -> InstituteDirectory:
    """Dependency to get the institute directory."""
    return InstituteDirectory(db)


async def get_current_institute(
    x_api_key: Optional[str] = Header(None, alias="x-api-key"),
    directory: InstituteDirectory = Depends(get_institute_directory),
) -> Institute:
    """
    Resolve the institute from the x-api-key header.

    Raises:
        NotFoundError: If the header is missing or matches no institute
    """
    return await directory.resolve_by_token(x_api_key)
