"""
User Database Service

CRUD operations for learners in the platform database.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, IndexModel, ReturnDocument
from pymongo.errors import DuplicateKeyError

from .models import User


class UserDBService:
    """
    Database service for learners.

    A learner is keyed by the (phone_number, institute_id) pair.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize user database service.

        Args:
            db: Platform database instance
        """
        self.db = db
        self.collection = db["users"]

    async def ensure_indexes(self) -> None:
        """Create necessary indexes for user collection."""
        indexes = [
            IndexModel([("user_id", ASCENDING)], unique=True),
            IndexModel([("institute_id", ASCENDING), ("phone_number", ASCENDING)], unique=True),
        ]
        await self.collection.create_indexes(indexes)

    async def get_or_create_user(
        self,
        phone_number: str,
        institute_id: str,
        name: Optional[str] = None,
    ) -> User:
        """
        Find a learner, creating it on first login.

        The lookup and insert are a single upsert, so repeated or concurrent
        logins never create a second record. The name is only set on insert.

        Args:
            phone_number: Learner phone number
            institute_id: Institute identifier
            name: Display name used when the learner is created

        Returns:
            Existing or newly created user
        """
        query = {"phone_number": phone_number, "institute_id": institute_id}
        on_insert = {
            "user_id": f"user_{uuid4().hex[:12]}",
            "name": name,
            "enrolled_batches": [],
            "created_at": datetime.utcnow(),
        }

        try:
            user_dict = await self.collection.find_one_and_update(
                query,
                {"$setOnInsert": on_insert},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            # A concurrent login won the insert
            user_dict = await self.collection.find_one(query)

        return User(**user_dict)

    async def get_user(self, phone_number: str, institute_id: str) -> Optional[User]:
        """
        Get learner by phone number within an institute.

        Args:
            phone_number: Learner phone number
            institute_id: Institute identifier

        Returns:
            User if found, None otherwise
        """
        user_dict = await self.collection.find_one(
            {"phone_number": phone_number, "institute_id": institute_id}
        )
        if user_dict:
            return User(**user_dict)
        return None

    async def add_enrolled_batch(self, phone_number: str, institute_id: str, batch_id: str) -> bool:
        """
        Add a batch to the learner's enrollment set.

        Args:
            phone_number: Learner phone number
            institute_id: Institute identifier
            batch_id: Batch identifier

        Returns:
            True if the learner exists (whether or not the batch was new), False otherwise
        """
        result = await self.collection.update_one(
            {"phone_number": phone_number, "institute_id": institute_id},
            {"$addToSet": {"enrolled_batches": batch_id}},
        )

        return result.matched_count > 0
