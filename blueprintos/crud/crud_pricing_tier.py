from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from blueprintos.models.pricing_tier import PricingTier
from blueprintos.schemas.pricing_tier import PricingTierCreate, PricingTierUpdate


def get(db: Session, workspace_id: UUID, tier_id: UUID) -> Optional[PricingTier]:
    return db.query(PricingTier).filter(
        PricingTier.id == tier_id,
        PricingTier.workspace_id == workspace_id,
    ).first()


def get_multi(db: Session, workspace_id: UUID) -> List[PricingTier]:
    return db.query(PricingTier).filter(
        PricingTier.workspace_id == workspace_id,
    ).order_by(PricingTier.order_index, PricingTier.created_at).all()


def get_active(db: Session, workspace_id: UUID) -> List[PricingTier]:
    """Public tiers in display order."""
    return db.query(PricingTier).filter(
        PricingTier.workspace_id == workspace_id,
        PricingTier.is_active == True,  # noqa: E712
    ).order_by(PricingTier.order_index, PricingTier.created_at).all()


def _clear_featured(db: Session, workspace_id: UUID, keep: Optional[UUID] = None) -> None:
    query = db.query(PricingTier).filter(
        PricingTier.workspace_id == workspace_id,
        PricingTier.is_featured == True,  # noqa: E712
    )
    if keep is not None:
        query = query.filter(PricingTier.id != keep)
    query.update({PricingTier.is_featured: False}, synchronize_session="fetch")


def create(db: Session, *, workspace_id: UUID, obj_in: PricingTierCreate) -> PricingTier:
    data = obj_in.model_dump(exclude_none=True)
    db_obj = PricingTier(workspace_id=workspace_id, **data)
    if db_obj.is_featured:
        _clear_featured(db, workspace_id)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def update(db: Session, *, db_obj: PricingTier, obj_in: PricingTierUpdate) -> PricingTier:
    update_data = obj_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        # columns are NOT NULL; an explicit null leaves the value as is
        if value is not None:
            setattr(db_obj, field, value)
    if update_data.get("is_featured"):
        # one featured tier per workspace
        _clear_featured(db, db_obj.workspace_id, keep=db_obj.id)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def remove(db: Session, *, db_obj: PricingTier) -> None:
    db.delete(db_obj)
    db.commit()
