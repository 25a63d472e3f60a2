"""
Learner Data Models

Learners are identified by phone number within one institute.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..shared_services.models import CamelModel


class User(CamelModel):
    """
    Learner enrolled with one institute.

    enrolled_batches behaves as a set: a batch id appears at most once.
    """

    user_id: str = Field(..., description="Unique user identifier")
    phone_number: str
    name: Optional[str] = Field(default=None)
    institute_id: str
    enrolled_batches: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
