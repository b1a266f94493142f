"""
Coach workspace API

Branding, public address, landing page document and onboarding progress of
the workspace owned by the calling coach.
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blueprintos.api import deps
from blueprintos.config import settings
from blueprintos.crud import crud_profile, crud_workspace
from blueprintos.models.workspace import Workspace
from blueprintos.schemas.landing_page import SECTION_MODELS, LandingPageConfig
from blueprintos.schemas.workspace import (
    OnboardingStepsUpdate,
    SubdomainAvailability,
    Workspace as WorkspaceSchema,
    WorkspaceUpdate,
)
from blueprintos.services.subdomains import (
    is_platform_host,
    is_subdomain_available,
    is_valid_custom_domain,
    is_valid_subdomain,
    slugify,
)

logger = logging.getLogger("blueprintos.workspace")

router = APIRouter()


@router.get("", response_model=WorkspaceSchema)
def read_workspace(
    workspace: Workspace = Depends(deps.get_current_coach_workspace),
) -> Any:
    return workspace


@router.patch("", response_model=WorkspaceSchema)
def update_workspace(
    *,
    db: Session = Depends(deps.get_db),
    workspace: Workspace = Depends(deps.get_current_coach_workspace),
    workspace_in: WorkspaceUpdate,
) -> Any:
    """
    Update branding, subdomain or custom domain. Address conflicts return 409.

    Custom domains need the workspace's custom domain feature and must lie
    outside the platform's own domain.
    """
    if workspace_in.subdomain is not None and workspace_in.subdomain != workspace.subdomain:
        if workspace_in.subdomain in settings.RESERVED_SUBDOMAINS:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Subdomain is reserved")
        other = crud_workspace.get_by_subdomain(db, workspace_in.subdomain)
        if other and other.id != workspace.id:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subdomain already taken")

    domain = workspace_in.custom_domain
    if domain is not None and domain != workspace.custom_domain:
        if not crud_workspace.custom_domain_enabled(db, workspace):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Custom domains are not included in this plan",
            )
        if not is_valid_custom_domain(domain):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid domain format")
        if is_platform_host(domain):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Hosts under {settings.ROOT_DOMAIN} are set through the subdomain",
            )
        other = crud_workspace.get_by_custom_domain(db, domain)
        if other and other.id != workspace.id:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Custom domain already in use")

    address_fields = {"subdomain", "custom_domain"} & workspace_in.model_fields_set
    try:
        workspace = crud_workspace.update(db, db_obj=workspace, obj_in=workspace_in)
    except IntegrityError:
        db.rollback()
        if not address_fields:
            raise
        # lost a race with another workspace claiming the same address
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Address already in use")

    logger.info("Workspace %s updated: %s", workspace.id, sorted(workspace_in.model_fields_set))
    return workspace


@router.get("/subdomain-availability", response_model=SubdomainAvailability)
def check_subdomain(
    *,
    db: Session = Depends(deps.get_db),
    workspace: Workspace = Depends(deps.get_current_coach_workspace),
    name: str = Query(..., min_length=1),
) -> Any:
    """
    Advisory only: the slug can still be claimed before it is saved.
    """
    slug = slugify(name)
    valid = is_valid_subdomain(slug) and slug not in settings.RESERVED_SUBDOMAINS
    available = valid and (slug == workspace.subdomain or is_subdomain_available(db, slug))
    return SubdomainAvailability(subdomain=slug, valid=valid, available=available)


# ═══════════════════════════════════════════
#  Landing page document
# ═══════════════════════════════════════════

@router.put("/landing-page", response_model=WorkspaceSchema)
def replace_landing_page(
    *,
    db: Session = Depends(deps.get_db),
    workspace: Workspace = Depends(deps.get_current_coach_workspace),
    config_in: LandingPageConfig,
) -> Any:
    """
    Replace the stored document. Absent sections render from the defaults.
    """
    return crud_workspace.replace_landing_page_config(db, db_obj=workspace, config=config_in.to_document())


@router.patch("/landing-page/{section}", response_model=WorkspaceSchema)
def update_landing_page_section(
    *,
    db: Session = Depends(deps.get_db),
    workspace: Workspace = Depends(deps.get_current_coach_workspace),
    section: str,
    fields: Dict[str, Any] = Body(...),
) -> Any:
    """
    Field-level edit of one section, e.g. ``PATCH /landing-page/hero {"headline": "..."}``.
    """
    model = SECTION_MODELS.get(section)
    if model is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown section: {section}")
    try:
        parsed = model.model_validate(fields)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False),
        )
    return crud_workspace.update_landing_page_section(
        db, db_obj=workspace, section=section, fields=parsed.model_dump(mode="json", exclude_unset=True),
    )


# ═══════════════════════════════════════════
#  Onboarding
# ═══════════════════════════════════════════

@router.post("/onboarding/steps", response_model=WorkspaceSchema)
def mark_onboarding_steps(
    *,
    db: Session = Depends(deps.get_db),
    workspace: Workspace = Depends(deps.get_current_coach_workspace),
    steps_in: OnboardingStepsUpdate,
) -> Any:
    try:
        return crud_workspace.mark_onboarding_steps(db, db_obj=workspace, steps=steps_in.steps)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/onboarding/complete", response_model=WorkspaceSchema)
def complete_onboarding(
    *,
    db: Session = Depends(deps.get_db),
    workspace: Workspace = Depends(deps.get_current_coach_workspace),
) -> Any:
    owner = crud_profile.get(db, workspace.owner_id) if workspace.owner_id else None
    return crud_workspace.complete_onboarding(db, db_obj=workspace, owner=owner)
