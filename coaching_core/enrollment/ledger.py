"""
Enrollment Ledger

Learner login, batch enrollment and enrolled-batch listing.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from structlog import get_logger

from ..batches.db_service import BatchDBService
from ..batches.models import Batch
from ..shared_services.errors import NotFoundError
from .db_service import UserDBService
from .models import User

logger = get_logger()


class EnrollmentLedger:
    """Service tying learners to the batches they are enrolled in."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        batch_db_service: Optional[BatchDBService] = None,
    ):
        self.user_db_service = UserDBService(db)
        self.batch_db_service = batch_db_service or BatchDBService(db)

    async def get_or_create_user(
        self, phone_number: str, institute_id: str, name: Optional[str] = None
    ) -> User:
        """Find-or-create the learner keyed by (phone_number, institute_id)."""
        user = await self.user_db_service.get_or_create_user(phone_number, institute_id, name)
        logger.info("learner_login", user_id=user.user_id, institute_id=institute_id)
        return user

    async def enroll(self, phone_number: str, institute_id: str, batch_id: str) -> None:
        """
        Enroll a learner in a batch.

        Enrolling again in the same batch is a no-op. The learner must
        already exist (see get_or_create_user); no user is created here.

        Raises:
            NotFoundError: If the batch does not exist in this institute,
                or the learner does not exist
        """
        batch = await self.batch_db_service.get_batch_by_id(batch_id)
        if not batch or batch.institute_id != institute_id:
            raise NotFoundError("Batch not found", batch_id=batch_id)

        matched = await self.user_db_service.add_enrolled_batch(phone_number, institute_id, batch_id)
        if not matched:
            logger.warning("enroll_failed_user_not_found", institute_id=institute_id)
            raise NotFoundError("User not found")

        logger.info("learner_enrolled", institute_id=institute_id, batch_id=batch_id)

    async def list_enrolled_batches(self, phone_number: str, institute_id: str) -> list[Batch]:
        """
        Resolve a learner's enrolled batches.

        Returns an empty list when the learner does not exist. Batches that
        have since been deleted are skipped.
        """
        user = await self.user_db_service.get_user(phone_number, institute_id)
        if not user:
            return []

        return await self.batch_db_service.get_batches_by_ids(user.enrolled_batches)
