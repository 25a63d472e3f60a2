"""
Institute Data Models

Defines the institute (tenant) record stored in the platform database.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from ..shared_services.models import CamelModel


class InstituteStatus(str, Enum):
    """Institute lifecycle status."""

    ACTIVE = "active"
    SUSPENDED = "suspended"


class Institute(CamelModel):
    """
    Institute model representing one coaching tenant.

    The api_key scopes student-app requests to the institute.
    """

    institute_id: str = Field(..., description="Unique institute identifier")
    name: str = Field(..., description="Institute display name")
    logo: Optional[str] = Field(default=None, description="URL to institute logo")
    primary_color: Optional[str] = Field(default=None, description="Theme color")

    api_key: str = Field(..., description="Access token, globally unique")

    # Admin credentials
    admin_email: Optional[str] = Field(default=None)
    hashed_password: Optional[str] = Field(default=None)

    status: InstituteStatus = Field(default=InstituteStatus.ACTIVE, validate_default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    def has_credentials(self) -> bool:
        """Check if an admin login is configured."""
        return bool(self.admin_email and self.hashed_password)
