from typing import Dict, List, Optional
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from blueprintos.services.subdomains import SLUG_PATTERN

_HEX_COLOR = r"^#[0-9a-fA-F]{6}$"


# Shared properties
class WorkspaceBase(BaseModel):
    name: Optional[str] = None
    logo_url: Optional[str] = None
    primary_color: Optional[str] = Field(default=None, pattern=_HEX_COLOR)
    secondary_color: Optional[str] = Field(default=None, pattern=_HEX_COLOR)
    tagline: Optional[str] = None
    about_text: Optional[str] = None


# Properties to receive via API on update
class WorkspaceUpdate(WorkspaceBase):
    subdomain: Optional[str] = Field(default=None, max_length=63)
    custom_domain: Optional[str] = Field(default=None, max_length=255)

    @field_validator("subdomain")
    @classmethod
    def _valid_subdomain(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().lower()
        if not SLUG_PATTERN.match(v):
            raise ValueError("Subdomain may only contain a-z, 0-9 and inner hyphens")
        return v

    @field_validator("custom_domain")
    @classmethod
    def _normalize_domain(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().lower().rstrip(".")
        return v or None


class WorkspaceInDBBase(WorkspaceBase):
    id: Optional[UUID] = None
    subdomain: Optional[str] = None
    custom_domain: Optional[str] = None
    owner_id: Optional[UUID] = None
    is_active: Optional[bool] = None
    onboarding_steps: Optional[Dict[str, bool]] = None
    landing_page_config: Optional[dict] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Additional properties to return via API
class Workspace(WorkspaceInDBBase):
    pass


class SubdomainAvailability(BaseModel):
    subdomain: str
    valid: bool
    available: bool


class OnboardingStepsUpdate(BaseModel):
    steps: List[str]


class BrandingPublic(BaseModel):
    workspace_id: Optional[UUID] = None
    name: str = ""
    logo_url: Optional[str] = None
    primary_color: str
    secondary_color: str
    tagline: str = ""
