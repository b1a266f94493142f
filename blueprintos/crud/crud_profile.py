from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from blueprintos.models.profile import Profile


def get(db: Session, profile_id: UUID) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.id == profile_id).first()


def create(
    db: Session,
    *,
    profile_id: UUID,
    role: str,
    full_name: str,
    workspace_id: Optional[UUID] = None,
) -> Profile:
    """Clients finish onboarding at signup; coaches go through the wizard."""
    db_obj = Profile(
        id=profile_id,
        role=role,
        full_name=full_name,
        workspace_id=workspace_id,
        onboarding_completed=(role == "client"),
    )
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj
