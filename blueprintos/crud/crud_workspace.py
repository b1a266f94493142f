import copy
from typing import Any, Dict, Iterable, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from blueprintos.models.profile import Profile
from blueprintos.models.subscription import WorkspaceFeatures, WorkspaceSubscription
from blueprintos.models.workspace import ONBOARDING_STEPS, Workspace
from blueprintos.schemas.workspace import WorkspaceUpdate
from blueprintos.services.subscription import (
    get_plan_feature,
    starter_feature_values,
    starter_subscription_values,
)

# Optional columns an explicit null clears; null is ignored for the rest
CLEARABLE_FIELDS = ("logo_url", "custom_domain")


def get(db: Session, workspace_id: UUID) -> Optional[Workspace]:
    return db.query(Workspace).filter(Workspace.id == workspace_id).first()


def get_by_owner(db: Session, owner_id: UUID) -> Optional[Workspace]:
    return db.query(Workspace).filter(Workspace.owner_id == owner_id).first()


def get_by_subdomain(db: Session, subdomain: str) -> Optional[Workspace]:
    return db.query(Workspace).filter(Workspace.subdomain == subdomain).first()


def get_by_custom_domain(db: Session, domain: str) -> Optional[Workspace]:
    return db.query(Workspace).filter(Workspace.custom_domain == domain).first()


def create(db: Session, *, name: str, subdomain: str, owner_id: UUID) -> Workspace:
    """Insert a workspace with the default landing page document.

    Raises ``IntegrityError`` when the subdomain is taken; the session is left
    for the caller to roll back.
    """
    db_obj = Workspace(name=name, subdomain=subdomain, owner_id=owner_id, is_active=True)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def create_subscription(db: Session, workspace_id: UUID) -> WorkspaceSubscription:
    db_obj = WorkspaceSubscription(workspace_id=workspace_id, **starter_subscription_values())
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def create_features(db: Session, workspace_id: UUID) -> WorkspaceFeatures:
    db_obj = WorkspaceFeatures(workspace_id=workspace_id, **starter_feature_values())
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def get_features(db: Session, workspace_id: UUID) -> Optional[WorkspaceFeatures]:
    return db.query(WorkspaceFeatures).filter(WorkspaceFeatures.workspace_id == workspace_id).first()


def custom_domain_enabled(db: Session, workspace: Workspace) -> bool:
    """Feature row decides; without one, the subscription plan does."""
    features = get_features(db, workspace.id)
    if features is not None:
        return bool(features.custom_domain_enabled)
    subscription = (
        db.query(WorkspaceSubscription)
        .filter(WorkspaceSubscription.workspace_id == workspace.id)
        .first()
    )
    return get_plan_feature(subscription.plan_tier if subscription else "starter", "custom_domain")


def update(db: Session, *, db_obj: Workspace, obj_in: WorkspaceUpdate) -> Workspace:
    """Apply branding / address edits.

    Color edits are mirrored into the stored config theme so the rendered
    page and the branding fields never disagree.
    """
    update_data = {
        field: value
        for field, value in obj_in.model_dump(exclude_unset=True).items()
        if value is not None or field in CLEARABLE_FIELDS
    }
    for field, value in update_data.items():
        setattr(db_obj, field, value)

    theme_colors = {k: v for k, v in update_data.items() if k in ("primary_color", "secondary_color") and v}
    if theme_colors:
        config = copy.deepcopy(db_obj.landing_page_config or {})
        theme = dict(config.get("theme") or {})
        theme.update(theme_colors)
        config["theme"] = theme
        db_obj.landing_page_config = config

    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


# ═══════════════════════════════════════════
#  Landing page document
# ═══════════════════════════════════════════

def replace_landing_page_config(db: Session, *, db_obj: Workspace, config: Dict[str, Any]) -> Workspace:
    db_obj.landing_page_config = config
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def update_landing_page_section(
    db: Session, *, db_obj: Workspace, section: str, fields: Dict[str, Any]
) -> Workspace:
    """Field-level edit of one stored section; other sections are untouched."""
    config = copy.deepcopy(db_obj.landing_page_config or {})
    current = dict(config.get(section) or {})
    current.update(fields)
    config[section] = current
    # JSON columns only track reassignment
    db_obj.landing_page_config = config
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


# ═══════════════════════════════════════════
#  Onboarding
# ═══════════════════════════════════════════

def mark_onboarding_steps(db: Session, *, db_obj: Workspace, steps: Iterable[str]) -> Workspace:
    """Set the given steps true. Steps are never reset."""
    unknown = [s for s in steps if s not in ONBOARDING_STEPS]
    if unknown:
        raise ValueError(f"Unknown onboarding steps: {', '.join(unknown)}")

    current = {step: bool((db_obj.onboarding_steps or {}).get(step)) for step in ONBOARDING_STEPS}
    for step in steps:
        current[step] = True
    db_obj.onboarding_steps = current
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def complete_onboarding(db: Session, *, db_obj: Workspace, owner: Optional[Profile]) -> Workspace:
    db_obj.onboarding_steps = {step: True for step in ONBOARDING_STEPS}
    db.add(db_obj)
    if owner is not None:
        owner.onboarding_completed = True
        db.add(owner)
    db.commit()
    db.refresh(db_obj)
    return db_obj
