from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel


class ThemeOut(BaseModel):
    primary_color: str
    secondary_color: str
    font_pairing: str
    button_style: str
    css_variables: Dict[str, str]


class WorkspaceSummary(BaseModel):
    id: UUID
    name: str
    subdomain: str
    custom_domain: Optional[str] = None
    logo_url: Optional[str] = None
    tagline: str = ""

    class Config:
        from_attributes = True


class RenderedSectionOut(BaseModel):
    key: str
    props: Dict[str, Any]


class LandingPagePublic(BaseModel):
    """Everything the presentation layer needs to draw one public page."""
    workspace: Optional[WorkspaceSummary] = None
    theme: ThemeOut
    sections: List[RenderedSectionOut] = []
    override_fields: Dict[str, str] = {}
