"""
Institute API Router

REST API endpoints for institute provisioning, admin login and
access-token resolution.
"""

from fastapi import APIRouter, Depends, status
from structlog import get_logger

from .dependencies import get_current_institute, get_institute_directory
from .directory import InstituteDirectory
from .models import Institute
from .schema import (
    InstituteCreateRequest,
    InstituteProvisioningResponse,
    InstituteResponse,
    TeacherLoginRequest,
    TeacherLoginResponse,
)

logger = get_logger()

router = APIRouter(prefix="/api", tags=["Institutes"])


def to_response(institute: Institute) -> InstituteResponse:
    """Render an institute without its credential."""
    return InstituteResponse(**institute.model_dump(exclude={"hashed_password"}))


@router.post(
    "/superadmin/add-institute",
    response_model=InstituteProvisioningResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Provision institute",
    description="Create an institute and return its access token",
)
async def add_institute(
    request: InstituteCreateRequest,
    directory: InstituteDirectory = Depends(get_institute_directory),
) -> InstituteProvisioningResponse:
    """Provision a new institute."""
    institute = await directory.provision(request)

    return InstituteProvisioningResponse(
        message="Success",
        institute_id=institute.institute_id,
        api_key=institute.api_key,
    )


@router.get(
    "/superadmin/all",
    response_model=list[InstituteResponse],
    summary="List institutes",
)
async def list_institutes(
    directory: InstituteDirectory = Depends(get_institute_directory),
) -> list[InstituteResponse]:
    """List all institutes with credentials redacted."""
    institutes = await directory.list_all()
    return [to_response(institute) for institute in institutes]


@router.post(
    "/teacher/login",
    response_model=TeacherLoginResponse,
    summary="Institute admin login",
)
async def teacher_login(
    request: TeacherLoginRequest,
    directory: InstituteDirectory = Depends(get_institute_directory),
) -> TeacherLoginResponse:
    """Authenticate an institute admin by email and password."""
    institute = await directory.authenticate(request.email, request.password)
    return TeacherLoginResponse(message="Success", institute=to_response(institute))


@router.get(
    "/institute/login/{key}",
    response_model=InstituteResponse,
    summary="Resolve institute by access token",
)
async def institute_login(
    key: str,
    directory: InstituteDirectory = Depends(get_institute_directory),
) -> InstituteResponse:
    """Resolve an institute from a path-embedded access token."""
    institute = await directory.resolve_by_token(key)
    return to_response(institute)


@router.get(
    "/institute/config",
    response_model=InstituteResponse,
    summary="Get institute config",
    description="Resolve the institute from the x-api-key header",
)
async def institute_config(
    institute: Institute = Depends(get_current_institute),
) -> InstituteResponse:
    """Get the calling institute's branding and status."""
    return to_response(institute)


@router.get(
    "/institute/config/{api_key}",
    response_model=InstituteResponse,
    summary="Get institute config by access token",
)
async def institute_config_by_key(
    api_key: str,
    directory: InstituteDirectory = Depends(get_institute_directory),
) -> InstituteResponse:
    """Resolve an institute from a path-embedded access token, whitespace trimmed."""
    institute = await directory.resolve_by_token(api_key.strip())
    return to_response(institute)
