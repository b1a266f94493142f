"""
Public Landing Page API

Unauthenticated endpoints for the coach's public site. The workspace is
resolved from the request host (custom domain first, then subdomain), or
from an explicit ?host= query param.
"""
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from blueprintos.api import deps
from blueprintos.crud import crud_pricing_tier, crud_testimonial
from blueprintos.schemas.rendering import LandingPagePublic
from blueprintos.schemas.workspace import BrandingPublic
from blueprintos.services.landing_page import resolve_theme
from blueprintos.services.section_renderer import build_landing_page
from blueprintos.services.workspace_resolver import resolve_workspace

router = APIRouter()


@router.get("/landing-page", response_model=LandingPagePublic)
def get_public_landing_page(
    db: Session = Depends(deps.get_db),
    host: str = Depends(deps.get_request_host),
) -> Any:
    """
    Rendered landing page for the workspace behind ``host``.
    An unknown host yields the generic payload, not an error.
    """
    workspace = resolve_workspace(db, host)
    if not workspace:
        return build_landing_page(None)

    return build_landing_page(
        workspace,
        pricing_tiers=crud_pricing_tier.get_active(db, workspace.id),
        testimonials=crud_testimonial.get_approved(db, workspace.id),
    )


@router.get("/branding", response_model=BrandingPublic)
def get_public_branding(
    db: Session = Depends(deps.get_db),
    host: str = Depends(deps.get_request_host),
) -> Any:
    """
    Branding only (login page, favicon, colors).
    """
    workspace = resolve_workspace(db, host)
    theme = resolve_theme(workspace)
    if not workspace:
        # Return default branding
        return BrandingPublic(
            primary_color=theme.primary_color,
            secondary_color=theme.secondary_color,
        )

    return BrandingPublic(
        workspace_id=workspace.id,
        name=workspace.name,
        logo_url=workspace.logo_url,
        primary_color=theme.primary_color,
        secondary_color=theme.secondary_color,
        tagline=workspace.tagline or "",
    )
