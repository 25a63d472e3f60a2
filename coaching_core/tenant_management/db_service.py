"""
Institute Database Service

Handles database operations for institutes in the platform database.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, IndexModel
from pymongo.errors import DuplicateKeyError

from ..shared_services.errors import ConflictError
from .models import Institute


class DuplicateApiKeyError(ConflictError):
    """Access token already belongs to another institute."""


class InstituteDBService:
    """Database service for institute management."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize institute database service.

        Args:
            db: Platform database instance
        """
        self.db = db
        self.collection = db["institutes"]

    async def ensure_indexes(self) -> None:
        """Create necessary indexes for institute collection."""
        indexes = [
            IndexModel([("institute_id", ASCENDING)], unique=True),
            IndexModel([("api_key", ASCENDING)], unique=True),
            # Unique only among institutes that configured an admin login
            IndexModel(
                [("admin_email", ASCENDING)],
                unique=True,
                partialFilterExpression={"admin_email": {"$type": "string"}},
            ),
            IndexModel([("created_at", ASCENDING)]),
        ]
        await self.collection.create_indexes(indexes)

    async def create_institute(self, institute: Institute) -> Institute:
        """
        Create a new institute.

        Args:
            institute: Institute object to create

        Returns:
            Created institute

        Raises:
            DuplicateApiKeyError: If the api_key already exists
            ConflictError: If the admin email or institute_id already exists
        """
        institute_dict = institute.model_dump()

        try:
            await self.collection.insert_one(institute_dict)
            return institute
        except DuplicateKeyError as e:
            # Classify by the violated index, never by the offending value
            key_pattern = (e.details or {}).get("keyPattern", {})
            if "api_key" in key_pattern:
                raise DuplicateApiKeyError("API key is already in use")
            elif "admin_email" in key_pattern:
                raise ConflictError(
                    f"Admin email '{institute.admin_email}' is already registered",
                    admin_email=institute.admin_email,
                )
            raise ConflictError(f"Institute '{institute.institute_id}' already exists")

    async def get_institute_by_api_key(self, api_key: str) -> Optional[Institute]:
        """
        Get institute by access token.

        Args:
            api_key: Access token

        Returns:
            Institute if found, None otherwise
        """
        institute_dict = await self.collection.find_one({"api_key": api_key})
        if institute_dict:
            return Institute(**institute_dict)
        return None

    async def get_institute_by_admin_email(self, email: str) -> Optional[Institute]:
        """
        Get institute by admin email.

        Args:
            email: Admin email

        Returns:
            Institute if found, None otherwise
        """
        institute_dict = await self.collection.find_one({"admin_email": email})
        if institute_dict:
            return Institute(**institute_dict)
        return None

    async def list_institutes(self) -> list[Institute]:
        """
        List all institutes, oldest first.

        Returns:
            List of institutes
        """
        cursor = self.collection.find({}).sort("created_at", ASCENDING)

        institutes = []
        async for institute_dict in cursor:
            institutes.append(Institute(**institute_dict))

        return institutes
