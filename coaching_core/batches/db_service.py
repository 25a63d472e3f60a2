"""
Batch Database Service

Stores batches as whole documents, scoped by institute, and persists
content-tree merges with a revision-checked replace.
"""

from typing import Optional
from uuid import uuid4

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, IndexModel
from pymongo.errors import DuplicateKeyError
from structlog import get_logger
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random,
)

from ..config import PlatformConfig, get_config
from ..shared_services.errors import ConflictError, NotFoundError, StaleBatchError
from .content_tree import ContentInput, add_content
from .models import Batch
from .schema import BatchCreateRequest

logger = get_logger()


def _log_stale_batch(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "batch_revision_conflict_retrying",
        batch_id=getattr(error, "batch_id", None),
        attempt=retry_state.attempt_number,
    )


class BatchDBService:
    """Database service for batches."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        platform_config: Optional[PlatformConfig] = None,
    ):
        """
        Initialize batch database service.

        Args:
            db: Platform database instance
            platform_config: Optional config (defaults to the cached platform config)
        """
        self.db = db
        self.collection = db["batches"]
        self.config = platform_config or get_config()

    async def ensure_indexes(self) -> None:
        """Create necessary indexes for batch collection."""
        indexes = [
            IndexModel([("batch_id", ASCENDING)], unique=True),
            IndexModel([("institute_id", ASCENDING), ("created_at", ASCENDING)]),
        ]
        await self.collection.create_indexes(indexes)

    async def create_batch(self, request: BatchCreateRequest) -> Batch:
        """
        Create a new batch.

        Args:
            request: Batch creation data

        Returns:
            Created batch

        Raises:
            ConflictError: If the generated batch_id already exists
        """
        batch = Batch(
            batch_id=f"batch_{uuid4().hex[:12]}",
            **request.model_dump(),
        )

        try:
            await self.collection.insert_one(batch.model_dump())
        except DuplicateKeyError:
            raise ConflictError(f"Batch '{batch.batch_id}' already exists")

        logger.info("batch_created", batch_id=batch.batch_id, institute_id=batch.institute_id)
        return batch

    async def get_batch_by_id(self, batch_id: str) -> Optional[Batch]:
        """
        Get batch by ID.

        Args:
            batch_id: Batch identifier

        Returns:
            Batch if found, None otherwise
        """
        batch_dict = await self.collection.find_one({"batch_id": batch_id})
        if batch_dict:
            return Batch(**batch_dict)
        return None

    async def get_batch(self, batch_id: str) -> Batch:
        """
        Get batch by ID or fail.

        Raises:
            NotFoundError: If the batch does not exist
        """
        batch = await self.get_batch_by_id(batch_id)
        if not batch:
            raise NotFoundError("Batch not found", batch_id=batch_id)
        return batch

    async def list_batches_by_institute(self, institute_id: str) -> list[Batch]:
        """
        List an institute's batches, oldest first.

        Args:
            institute_id: Institute identifier

        Returns:
            List of batches (empty if none)
        """
        cursor = self.collection.find({"institute_id": institute_id}).sort("created_at", ASCENDING)

        batches = []
        async for batch_dict in cursor:
            batches.append(Batch(**batch_dict))

        return batches

    async def get_batches_by_ids(self, batch_ids: list[str]) -> list[Batch]:
        """
        Resolve batch references.

        Args:
            batch_ids: Batch identifiers

        Returns:
            Batches in the order of batch_ids; unknown ids are skipped
        """
        if not batch_ids:
            return []

        found = {}
        async for batch_dict in self.collection.find({"batch_id": {"$in": list(batch_ids)}}):
            batch = Batch(**batch_dict)
            found[batch.batch_id] = batch

        return [found[batch_id] for batch_id in batch_ids if batch_id in found]

    async def delete_batch(self, batch_id: str) -> bool:
        """
        Permanently delete a batch.

        Args:
            batch_id: Batch identifier

        Returns:
            True if deleted, False if not found
        """
        result = await self.collection.delete_one({"batch_id": batch_id})
        return result.deleted_count > 0

    async def replace_batch(self, batch: Batch) -> Batch:
        """
        Write a whole batch document back, if nobody else has since.

        The replace only matches the revision the batch was loaded at; on
        success the stored and returned revision are bumped by one.

        Args:
            batch: Batch as loaded and mutated

        Returns:
            The batch with its new revision

        Raises:
            StaleBatchError: If the stored revision moved on (or the batch vanished)
        """
        expected_revision = batch.revision
        updated = batch.model_copy(update={"revision": expected_revision + 1})

        result = await self.collection.replace_one(
            {"batch_id": batch.batch_id, "revision": expected_revision},
            updated.model_dump(),
        )

        if result.matched_count == 0:
            raise StaleBatchError(batch.batch_id, expected_revision)

        return updated

    async def add_content(
        self,
        batch_id: str,
        subject_name: str,
        chapter_name: str,
        item: ContentInput,
    ) -> Batch:
        """
        Add one content item to a stored batch.

        Loads the batch, merges the item into its tree and replaces the
        document. If another writer got in between, the whole sequence is
        retried against the fresh document.

        Args:
            batch_id: Batch identifier
            subject_name: Subject to add under
            chapter_name: Chapter to add under
            item: Content item

        Returns:
            The persisted batch

        Raises:
            NotFoundError: If the batch does not exist
            InvalidInputError: If the item is invalid
            StaleBatchError: If every attempt lost the race
        """

        @retry(
            stop=stop_after_attempt(self.config.batch_update_max_attempts),
            wait=wait_random(min=0, max=0.05),
            retry=retry_if_exception_type(StaleBatchError),
            before_sleep=_log_stale_batch,
            reraise=True,
        )
        async def _merge_and_save() -> Batch:
            batch = await self.get_batch(batch_id)
            add_content(batch, subject_name, chapter_name, item)
            return await self.replace_batch(batch)

        batch = await _merge_and_save()

        logger.info(
            "batch_content_added",
            batch_id=batch_id,
            subject_name=subject_name,
            chapter_name=chapter_name,
            revision=batch.revision,
        )
        return batch
