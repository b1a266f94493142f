"""Request / response bodies of the provisioning endpoints (camelCase on the wire)."""
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SignupRequest(_CamelModel):
    # Presence is checked by the workflow so a missing field maps to MISSING_FIELDS
    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = Field(default=None, alias="fullName")
    role: Optional[Literal["coach", "client"]] = None
    workspace_name: Optional[str] = Field(default=None, alias="workspaceName")


class SignupResponse(_CamelModel):
    success: bool
    user_id: Optional[str] = Field(default=None, alias="userId")
    workspace_id: Optional[str] = Field(default=None, alias="workspaceId")
    profile_id: Optional[str] = Field(default=None, alias="profileId")
    error: Optional[str] = None
    error_code: Optional[str] = Field(default=None, alias="errorCode")
    step: Optional[str] = None


class RecoveryRequest(_CamelModel):
    user_id: Optional[str] = Field(default=None, alias="userId")


class RecoveryResponse(_CamelModel):
    success: bool
    message: Optional[str] = None
    profile_created: bool = Field(default=False, alias="profileCreated")
    workspace_created: bool = Field(default=False, alias="workspaceCreated")
    profile_id: Optional[str] = Field(default=None, alias="profileId")
    workspace_id: Optional[str] = Field(default=None, alias="workspaceId")
    error: Optional[str] = None
