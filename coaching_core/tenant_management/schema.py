"""
Institute API Schemas

Request and response models for super admin, teacher and institute endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, EmailStr, Field

from ..shared_services.models import CamelModel
from .models import InstituteStatus


class InstituteCreateRequest(CamelModel):
    """Request model for provisioning a new institute."""

    name: str = Field(..., min_length=1, max_length=200, description="Institute display name")
    logo: Optional[str] = Field(default=None)
    primary_color: Optional[str] = Field(default=None)
    admin_email: Optional[EmailStr] = Field(default=None)
    password: Optional[str] = Field(default=None, min_length=1, description="Admin password")
    api_key: Optional[str] = Field(
        default=None, min_length=1, description="Access token; generated when omitted"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Acme Coaching",
                "logo": "https://cdn.example.com/acme.png",
                "primaryColor": "#4F46E5",
                "adminEmail": "admin@acme.com",
                "password": "s3cret",
            }
        }
    )


class InstituteResponse(CamelModel):
    """Institute as returned to clients, credential redacted."""

    institute_id: str
    name: str
    logo: Optional[str]
    primary_color: Optional[str]
    api_key: str
    admin_email: Optional[str]
    status: InstituteStatus
    created_at: datetime


class InstituteProvisioningResponse(CamelModel):
    """Response model for a provisioned institute."""

    message: str
    institute_id: str
    api_key: str


class TeacherLoginRequest(CamelModel):
    """Admin login by email and password."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TeacherLoginResponse(CamelModel):
    message: str
    institute: InstituteResponse
