"""
Account provisioning API

POST /auth/signup          coach or client signup
POST /auth/admin-recovery  create a missing profile (development / staging only)
"""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from blueprintos.api import deps
from blueprintos.schemas.provisioning import (
    RecoveryRequest,
    RecoveryResponse,
    SignupRequest,
    SignupResponse,
)
from blueprintos.services.identity_provider import IdentityProviderClient
from blueprintos.services.provisioning import (
    ProvisioningError,
    recover_profile,
    signup_account,
)

logger = logging.getLogger("blueprintos.provisioning")

router = APIRouter()


def _json(model: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=model.model_dump(by_alias=True, exclude_none=True),
    )


@router.post("/signup", response_model=SignupResponse, response_model_by_alias=True)
def signup(
    *,
    db: Session = Depends(deps.get_db),
    identity: IdentityProviderClient = Depends(deps.get_identity_provider),
    body: SignupRequest = Body(...),
) -> Any:
    """
    Create identity, workspace (coaches), subscription, features and profile.
    """
    try:
        result = signup_account(db, identity, body)
    except ProvisioningError as e:
        return _json(e.to_signup_response(), e.status_code)
    except Exception:
        logger.exception("Unexpected signup error")
        return _json(
            SignupResponse(success=False, error="Internal server error", error_code="INTERNAL_ERROR"),
            500,
        )
    return _json(result)


@router.post("/admin-recovery", response_model=RecoveryResponse, response_model_by_alias=True)
def admin_recovery(
    *,
    db: Session = Depends(deps.get_db),
    identity: IdentityProviderClient = Depends(deps.get_identity_provider),
    body: RecoveryRequest = Body(...),
) -> Any:
    """
    Build the profile (and coach workspace) for an identity that has none.
    """
    try:
        result = recover_profile(db, identity, body.user_id)
    except ProvisioningError as e:
        return _json(e.to_recovery_response(), e.status_code)
    except Exception:
        logger.exception("Unexpected admin recovery error")
        return _json(
            RecoveryResponse(success=False, message="Internal server error", error="INTERNAL_ERROR"),
            500,
        )
    return _json(result)
