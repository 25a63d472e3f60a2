"""
Tenant Management Module

Handles institute provisioning, access-token resolution and admin login.
"""

from .directory import InstituteDirectory
from .models import Institute, InstituteStatus
from .schema import (
    InstituteCreateRequest,
    InstituteProvisioningResponse,
    InstituteResponse,
)

__all__ = [
    "Institute",
    "InstituteStatus",
    "InstituteDirectory",
    "InstituteCreateRequest",
    "InstituteProvisioningResponse",
    "InstituteResponse",
]
