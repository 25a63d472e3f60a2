"""
Batch API Router

REST API endpoints for batch management and study material uploads.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from structlog import get_logger

from ..shared_services.database import get_platform_db
from ..shared_services.errors import InvalidInputError, NotFoundError
from .db_service import BatchDBService
from .models import Batch
from .schema import (
    AddMaterialRequest,
    BatchCreatedResponse,
    BatchCreateRequest,
    ContentAddedResponse,
    MessageResponse,
)

logger = get_logger()

router = APIRouter(prefix="/api", tags=["Batches"])


def get_batch_db_service(db: AsyncIOMotorDatabase = Depends(get_platform_db)) -> BatchDBService:
    """Dependency to get batch database service."""
    return BatchDBService(db)


@router.post(
    "/admin/add-batch",
    response_model=BatchCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create batch",
)
async def add_batch(
    request: BatchCreateRequest,
    batch_service: BatchDBService = Depends(get_batch_db_service),
) -> BatchCreatedResponse:
    """Create a batch for an institute."""
    batch = await batch_service.create_batch(request)
    return BatchCreatedResponse(message="Success", batch=batch)


@router.get(
    "/admin/my-batches/{inst_id}",
    response_model=list[Batch],
    summary="List institute batches (admin)",
)
async def admin_list_batches(
    inst_id: str,
    batch_service: BatchDBService = Depends(get_batch_db_service),
) -> list[Batch]:
    return await batch_service.list_batches_by_institute(inst_id)


@router.get(
    "/batches",
    response_model=list[Batch],
    summary="List institute batches",
    description="Institute taken from the x-institute-id header",
)
async def list_batches(
    x_institute_id: Optional[str] = Header(None, alias="x-institute-id"),
    batch_service: BatchDBService = Depends(get_batch_db_service),
) -> list[Batch]:
    if not x_institute_id:
        raise InvalidInputError("x-institute-id header required")
    return await batch_service.list_batches_by_institute(x_institute_id)


@router.get(
    "/batches/{inst_id}",
    response_model=list[Batch],
    summary="List institute batches by path",
)
async def list_batches_by_path(
    inst_id: str,
    batch_service: BatchDBService = Depends(get_batch_db_service),
) -> list[Batch]:
    return await batch_service.list_batches_by_institute(inst_id)


@router.post(
    "/admin/add-material/{batch_id}",
    response_model=ContentAddedResponse,
    summary="Add study material",
    description="Add one video or PDF under a subject and chapter, creating them if needed",
)
async def add_material(
    batch_id: str,
    request: AddMaterialRequest,
    batch_service: BatchDBService = Depends(get_batch_db_service),
) -> ContentAddedResponse:
    """Merge one content item into the batch's content tree."""
    item = {
        "title": request.title,
        "type": request.type,
        "url": request.url,
        "duration": request.duration,
    }
    batch = await batch_service.add_content(
        batch_id, request.subject_name, request.chapter_name, item
    )
    return ContentAddedResponse(message="Content Added Successfully!", batch=batch)


@router.delete(
    "/admin/delete-batch/{batch_id}",
    response_model=MessageResponse,
    summary="Delete batch",
)
async def delete_batch(
    batch_id: str,
    batch_service: BatchDBService = Depends(get_batch_db_service),
) -> MessageResponse:
    deleted = await batch_service.delete_batch(batch_id)

    if not deleted:
        raise NotFoundError("Batch not found", batch_id=batch_id)

    logger.info("batch_deleted", batch_id=batch_id)
    return MessageResponse(message="Deleted Successfully!")
