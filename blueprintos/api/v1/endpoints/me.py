import uuid
from typing import Any, List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from blueprintos.api import deps
from blueprintos.crud import crud_profile
from blueprintos.schemas.workspace import Workspace as WorkspaceSchema
from blueprintos.services.profile_loader import LoadState, ProfileLoader, recovery_actions

router = APIRouter()


class ProfileOut(BaseModel):
    id: uuid.UUID
    role: str
    full_name: str
    avatar_url: Optional[str] = None
    bio: str = ""
    timezone: str = "UTC"
    phone: Optional[str] = None
    onboarding_completed: bool
    workspace_id: Optional[uuid.UUID] = None

    class Config:
        from_attributes = True


class MeOut(BaseModel):
    profile: ProfileOut
    workspace: Optional[WorkspaceSchema] = None


class ProfileMissing(BaseModel):
    detail: str
    state: str
    attempts: int
    actions: List[str]


def get_profile_loader() -> type:
    return ProfileLoader


@router.get("", response_model=MeOut, responses={404: {"model": ProfileMissing}})
def read_me(
    db: Session = Depends(deps.get_db),
    user_id: uuid.UUID = Depends(deps.get_current_user_id),
    loader_cls: type = Depends(get_profile_loader),
) -> Any:
    """
    Current profile and workspace. Retries the lookup on a short schedule
    because the profile can trail the identity right after signup.
    """
    def fetch():
        # drop cached state so rows committed meanwhile become visible
        db.expire_all()
        return crud_profile.get(db, user_id)

    loader = loader_cls(fetch)
    state = loader.run()
    if state != LoadState.LOADED:
        return JSONResponse(
            status_code=404,
            content=ProfileMissing(
                detail="Profile not found",
                state=state.value,
                attempts=loader.attempts,
                actions=recovery_actions(),
            ).model_dump(),
        )

    profile = loader.result
    return {"profile": profile, "workspace": profile.workspace}
