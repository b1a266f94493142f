"""
Shared FastAPI dependencies: database session, external clients and the
authenticated caller.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from blueprintos.crud import crud_profile, crud_workspace
from blueprintos.db.session import get_db
from blueprintos.middleware.workspace_host import request_host
from blueprintos.models.profile import Profile
from blueprintos.models.workspace import Workspace
from blueprintos.services.identity_provider import (
    IdentityProviderClient,
    InvalidTokenError,
    verify_access_token,
)
from blueprintos.services.landing_page_generator import LandingPageGenerator

logger = logging.getLogger("blueprintos.auth")

bearer_scheme = HTTPBearer(auto_error=False)


def get_identity_provider() -> IdentityProviderClient:
    return IdentityProviderClient()


def get_generator() -> LandingPageGenerator:
    return LandingPageGenerator()


def get_token_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Dict[str, Any]:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return verify_access_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.info("Rejected access token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_current_user_id(claims: Dict[str, Any] = Depends(get_token_claims)) -> uuid.UUID:
    try:
        return uuid.UUID(str(claims.get("sub")))
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject")


def get_current_profile(
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
) -> Profile:
    profile = crud_profile.get(db, user_id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


def get_current_coach_workspace(
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
) -> Workspace:
    """The workspace owned by the calling coach."""
    if not profile.is_coach:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Coach access required")

    workspace = None
    if profile.workspace_id:
        workspace = crud_workspace.get(db, profile.workspace_id)
    if workspace is None:
        workspace = crud_workspace.get_by_owner(db, profile.id)
    if workspace is None or workspace.owner_id != profile.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Workspace not found")
    return workspace


def get_request_host(
    request: Request,
    host: Optional[str] = Query(None, description="Hostname to resolve instead of the request's own"),
) -> str:
    """Explicit ?host= wins; otherwise the host seen by the middleware."""
    return host or request_host(request)
