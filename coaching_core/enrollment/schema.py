"""
Enrollment API Schemas

Request and response models for learner login and enrollment.
"""

from typing import Optional

from pydantic import Field

from ..shared_services.models import CamelModel
from .models import User


class LearnerLoginRequest(CamelModel):
    phone_number: str = Field(..., min_length=1)
    name: Optional[str] = Field(default=None)
    institute_id: str = Field(..., min_length=1)


class LearnerLoginResponse(CamelModel):
    message: str
    user: User


class EnrollRequest(CamelModel):
    phone_number: str = Field(..., min_length=1)
    institute_id: str = Field(..., min_length=1)
    batch_id: str = Field(..., min_length=1)


class EnrollResponse(CamelModel):
    success: bool
    message: str
