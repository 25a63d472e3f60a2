"""
Enrollment API Router

REST API endpoints for learner login and batch enrollment.
"""

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..batches.models import Batch
from ..shared_services.database import get_platform_db
from .ledger import EnrollmentLedger
from .schema import EnrollRequest, EnrollResponse, LearnerLoginRequest, LearnerLoginResponse

router = APIRouter(prefix="/api/auth", tags=["Enrollment"])


def get_enrollment_ledger(db: AsyncIOMotorDatabase = Depends(get_platform_db)) -> EnrollmentLedger:
    """Dependency to get the enrollment ledger."""
    return EnrollmentLedger(db)


@router.post(
    "/login",
    response_model=LearnerLoginResponse,
    summary="Learner login",
    description="Find the learner by phone number and institute, creating it on first login",
)
async def login(
    request: LearnerLoginRequest,
    ledger: EnrollmentLedger = Depends(get_enrollment_ledger),
) -> LearnerLoginResponse:
    user = await ledger.get_or_create_user(request.phone_number, request.institute_id, request.name)
    return LearnerLoginResponse(message="Success", user=user)


@router.post(
    "/enroll",
    response_model=EnrollResponse,
    summary="Enroll in batch",
)
async def enroll(
    request: EnrollRequest,
    ledger: EnrollmentLedger = Depends(get_enrollment_ledger),
) -> EnrollResponse:
    await ledger.enroll(request.phone_number, request.institute_id, request.batch_id)
    return EnrollResponse(success=True, message="Enrolled Successfully!")


@router.get(
    "/my-batches/{phone}/{inst_id}",
    response_model=list[Batch],
    summary="List enrolled batches",
)
async def my_batches(
    phone: str,
    inst_id: str,
    ledger: EnrollmentLedger = Depends(get_enrollment_ledger),
) -> list[Batch]:
    return await ledger.list_enrolled_batches(phone, inst_id)
