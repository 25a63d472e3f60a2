"""
Institute Directory

Provisioning, access-token resolution and admin authentication for
institutes:
1. Provision an institute, generating an access token when none is supplied
2. Resolve an institute from its access token
3. Authenticate an institute admin by email and password
4. List all institutes
"""

from typing import Optional
from uuid import uuid4

from motor.motor_asyncio import AsyncIOMotorDatabase
from structlog import get_logger
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
)

from ..config import PlatformConfig, get_config
from ..shared_services.errors import NotFoundError, UnauthorizedError
from .db_service import DuplicateApiKeyError, InstituteDBService
from .models import Institute
from .schema import InstituteCreateRequest
from .security import (
    generate_api_key,
    get_password_hash,
    normalize_email,
    verify_password,
)

logger = get_logger()


def _log_api_key_collision(retry_state: RetryCallState) -> None:
    logger.warning("generated_api_key_collision", attempt=retry_state.attempt_number)


class InstituteDirectory:
    """Service for managing institutes and their access tokens."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        platform_config: Optional[PlatformConfig] = None,
    ):
        """
        Initialize institute directory.

        Args:
            db: Platform database instance
            platform_config: Optional config (defaults to the cached platform config)
        """
        self.config = platform_config or get_config()
        self.institute_db_service = InstituteDBService(db)

    def _generate_institute_id(self) -> str:
        return f"inst_{uuid4().hex[:12]}"

    async def provision(self, request: InstituteCreateRequest) -> Institute:
        """
        Provision a new institute.

        A caller-supplied api_key is used as-is. Otherwise a key is
        generated, and a fresh one is drawn if it collides with an
        existing institute's key.

        Args:
            request: Institute creation request

        Returns:
            Provisioned institute, including its api_key

        Raises:
            ConflictError: If the supplied api_key or admin email is taken,
                or every generated key collided
        """
        institute_id = self._generate_institute_id()
        hashed_password = get_password_hash(request.password) if request.password else None

        logger.info("provisioning_institute", institute_id=institute_id, name=request.name)

        def build(api_key: str) -> Institute:
            return Institute(
                institute_id=institute_id,
                name=request.name,
                logo=request.logo,
                primary_color=request.primary_color,
                api_key=api_key,
                admin_email=normalize_email(request.admin_email),
                hashed_password=hashed_password,
            )

        if request.api_key:
            institute = await self.institute_db_service.create_institute(build(request.api_key))
        else:

            @retry(
                stop=stop_after_attempt(self.config.api_key_max_attempts),
                retry=retry_if_exception_type(DuplicateApiKeyError),
                before_sleep=_log_api_key_collision,
                reraise=True,
            )
            async def _create_with_generated_key() -> Institute:
                api_key = generate_api_key(self.config.api_key_prefix)
                return await self.institute_db_service.create_institute(build(api_key))

            institute = await _create_with_generated_key()

        logger.info("institute_provisioned", institute_id=institute.institute_id)
        return institute

    async def resolve_by_token(self, api_key: Optional[str]) -> Institute:
        """
        Resolve an institute from its access token.

        Args:
            api_key: Access token

        Returns:
            Matching institute

        Raises:
            NotFoundError: If no institute holds the token
        """
        institute = None
        if api_key:
            institute = await self.institute_db_service.get_institute_by_api_key(api_key)

        if not institute:
            logger.warning("institute_not_found_for_api_key")
            raise NotFoundError("Institute not found")

        return institute

    async def authenticate(self, email: str, password: str) -> Institute:
        """
        Authenticate an institute admin.

        Args:
            email: Admin email
            password: Plain text password

        Returns:
            Institute the admin belongs to

        Raises:
            UnauthorizedError: If the email is unknown or the password does not match
        """
        normalized_email = normalize_email(email)
        institute = None
        if normalized_email:
            institute = await self.institute_db_service.get_institute_by_admin_email(
                normalized_email
            )

        if not institute or not institute.has_credentials():
            logger.warning("teacher_login_failed_unknown_email")
            raise UnauthorizedError("Incorrect email or password")

        if not verify_password(password, institute.hashed_password):
            logger.warning("teacher_login_failed_invalid_password", institute_id=institute.institute_id)
            raise UnauthorizedError("Incorrect email or password")

        logger.info("teacher_login_successful", institute_id=institute.institute_id)
        return institute

    async def list_all(self) -> list[Institute]:
        """List all institutes."""
        return await self.institute_db_service.list_institutes()
