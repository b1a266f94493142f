"""
Account provisioning: coach / client signup and admin profile recovery.

Signup steps, each committed on its own:
  auth_user -> workspace -> subscription -> features -> profile
(workspace, subscription and features only for coaches).

Any failure after the identity exists deletes the identity again. Rows written
by the workspace / subscription / features steps are NOT removed; the caller
must treat the signup as failed.
"""
import logging
import uuid
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blueprintos.config import settings
from blueprintos.crud import crud_profile, crud_workspace
from blueprintos.middleware.metrics import record_provisioning_failure
from blueprintos.models.profile import ProfileRole
from blueprintos.models.workspace import Workspace
from blueprintos.schemas.provisioning import (
    RecoveryResponse,
    SignupRequest,
    SignupResponse,
)
from blueprintos.services.identity_provider import (
    IdentityProviderClient,
    IdentityProviderError,
)
from blueprintos.services.subdomains import generate_workspace_subdomain

logger = logging.getLogger("blueprintos.provisioning")


class ProvisioningError(Exception):
    """A signup / recovery request that ends with a structured error body."""

    def __init__(self, message: str, error_code: str, status_code: int, step: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.step = step

    def to_signup_response(self) -> SignupResponse:
        return SignupResponse(success=False, error=self.message, error_code=self.error_code, step=self.step)

    def to_recovery_response(self) -> RecoveryResponse:
        return RecoveryResponse(success=False, message=self.message, error=self.error_code)


class SubdomainAllocationError(Exception):
    pass


def create_workspace_with_subdomain(db: Session, name: str, owner_id: uuid.UUID) -> Workspace:
    """Insert a workspace, drawing a fresh random suffix on subdomain conflicts."""
    attempts = max(1, settings.SUBDOMAIN_ALLOCATION_ATTEMPTS)
    for attempt in range(1, attempts + 1):
        subdomain = generate_workspace_subdomain(name)
        try:
            return crud_workspace.create(db, name=name, subdomain=subdomain, owner_id=owner_id)
        except IntegrityError:
            db.rollback()
            logger.warning(
                "Subdomain %s already taken (attempt %d/%d)", subdomain, attempt, attempts,
            )
    raise SubdomainAllocationError(f"Could not allocate a unique subdomain for {name!r}")


def _provision_coach_workspace(db: Session, name: str, owner_id: uuid.UUID, progress: dict) -> Workspace:
    progress["step"] = "workspace"
    workspace = create_workspace_with_subdomain(db, name, owner_id)
    logger.info("Workspace created: %s (%s)", workspace.id, workspace.subdomain)

    progress["step"] = "subscription"
    crud_workspace.create_subscription(db, workspace.id)

    progress["step"] = "features"
    crud_workspace.create_features(db, workspace.id)
    return workspace


def _missing_fields(request: SignupRequest) -> bool:
    return not all((request.email, request.password, request.full_name, request.role))


def signup_account(
    db: Session,
    identity: IdentityProviderClient,
    request: SignupRequest,
) -> SignupResponse:
    """Run the signup workflow. Raises ``ProvisioningError`` on any failure."""
    if _missing_fields(request):
        raise ProvisioningError("Missing required fields", "MISSING_FIELDS", 400)

    is_coach = request.role == ProfileRole.COACH.value
    workspace_name = (request.workspace_name or "").strip()
    if is_coach and not workspace_name:
        raise ProvisioningError(
            "Workspace name required for coach accounts",
            "MISSING_WORKSPACE_NAME",
            400,
            step="validation",
        )

    logger.info("Starting signup as %s", request.role)

    try:
        user = identity.create_user(
            request.email,
            request.password,
            {"full_name": request.full_name, "role": request.role},
        )
    except IdentityProviderError as e:
        logger.warning("Identity creation failed: %s", e.message)
        record_provisioning_failure("auth_user")
        raise ProvisioningError(
            e.message or "Failed to create user", "AUTH_CREATION_FAILED", 400, step="auth_user",
        ) from e

    logger.info("Identity created: %s", user.id)
    progress = {"step": "profile"}
    workspace = None
    try:
        user_uuid = uuid.UUID(user.id)
        if is_coach:
            workspace = _provision_coach_workspace(db, workspace_name, user_uuid, progress)

        progress["step"] = "profile"
        profile = crud_profile.create(
            db,
            profile_id=user_uuid,
            role=request.role,
            full_name=request.full_name,
            workspace_id=workspace.id if workspace else None,
        )
    except Exception as e:
        step = progress["step"]
        db.rollback()
        logger.exception("Signup failed at step %s, removing identity %s", step, user.id)
        record_provisioning_failure(step)
        _compensate_identity(identity, user.id)
        raise ProvisioningError(str(e) or "Account setup failed", "SETUP_FAILED", 500, step=step) from e

    logger.info("Signup complete for %s", user.id)
    return SignupResponse(
        success=True,
        user_id=user.id,
        workspace_id=str(workspace.id) if workspace else None,
        profile_id=str(profile.id),
    )


def _compensate_identity(identity: IdentityProviderClient, user_id: str) -> None:
    try:
        identity.delete_user(user_id)
    except IdentityProviderError as e:
        # the orphaned identity needs manual cleanup
        logger.error("Failed to delete identity %s after setup failure: %s", user_id, e.message)


def recover_profile(
    db: Session,
    identity: IdentityProviderClient,
    user_id: Optional[str],
) -> RecoveryResponse:
    """Create the missing profile (and coach workspace) for an existing identity."""
    if not settings.allows_admin_recovery:
        raise ProvisioningError(
            "Admin recovery is only available in development and staging",
            "PRODUCTION_DISABLED",
            403,
        )
    if not user_id:
        raise ProvisioningError("Missing userId", "MISSING_USER_ID", 400)

    try:
        user_uuid = uuid.UUID(str(user_id))
    except ValueError:
        raise ProvisioningError("Auth user not found", "USER_NOT_FOUND", 404)

    try:
        user = identity.get_user(str(user_uuid))
    except IdentityProviderError as e:
        logger.error("Identity lookup failed for %s: %s", user_id, e.message)
        raise ProvisioningError(e.message, "INTERNAL_ERROR", 500) from e
    if user is None:
        raise ProvisioningError("Auth user not found", "USER_NOT_FOUND", 404)

    existing = crud_profile.get(db, user_uuid)
    if existing:
        logger.info("Profile already exists for %s", user_id)
        return RecoveryResponse(
            success=True,
            message="Profile already exists",
            profile_created=False,
            profile_id=str(existing.id),
            workspace_id=str(existing.workspace_id) if existing.workspace_id else None,
        )

    metadata = user.user_metadata or {}
    full_name = metadata.get("full_name") or user.email.split("@")[0] or "User"
    role = metadata.get("role") or ProfileRole.COACH.value
    logger.info("Recovering profile for %s as %s", user_id, role)

    progress = {"step": "profile"}
    workspace = None
    try:
        if role == ProfileRole.COACH.value:
            workspace = _provision_coach_workspace(db, f"{full_name}'s Workspace", user_uuid, progress)

        progress["step"] = "profile"
        profile = crud_profile.create(
            db,
            profile_id=user_uuid,
            role=role,
            full_name=full_name,
            workspace_id=workspace.id if workspace else None,
        )
    except Exception as e:
        db.rollback()
        logger.exception("Profile recovery failed at step %s for %s", progress["step"], user_id)
        record_provisioning_failure(progress["step"])
        raise ProvisioningError(str(e) or "Internal server error", "INTERNAL_ERROR", 500) from e

    return RecoveryResponse(
        success=True,
        message="Profile created successfully",
        profile_created=True,
        workspace_created=workspace is not None,
        profile_id=str(profile.id),
        workspace_id=str(workspace.id) if workspace else None,
    )
