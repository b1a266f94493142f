from typing import Any, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from blueprintos.api import deps
from blueprintos.crud import crud_pricing_tier
from blueprintos.models.workspace import Workspace
from blueprintos.schemas.pricing_tier import PricingTier, PricingTierCreate, PricingTierUpdate

router = APIRouter()


@router.get("", response_model=List[PricingTier])
def read_pricing_tiers(
    db: Session = Depends(deps.get_db),
    workspace: Workspace = Depends(deps.get_current_coach_workspace),
) -> Any:
    """
    All tiers of the coach's workspace, inactive ones included.
    """
    return crud_pricing_tier.get_multi(db, workspace.id)


@router.post("", response_model=PricingTier, status_code=status.HTTP_201_CREATED)
def create_pricing_tier(
    *,
    db: Session = Depends(deps.get_db),
    workspace: Workspace = Depends(deps.get_current_coach_workspace),
    tier_in: PricingTierCreate,
) -> Any:
    """
    Creating a featured tier un-features the previous one.
    """
    return crud_pricing_tier.create(db, workspace_id=workspace.id, obj_in=tier_in)


@router.patch("/{tier_id}", response_model=PricingTier)
def update_pricing_tier(
    *,
    db: Session = Depends(deps.get_db),
    workspace: Workspace = Depends(deps.get_current_coach_workspace),
    tier_id: UUID,
    tier_in: PricingTierUpdate,
) -> Any:
    tier = crud_pricing_tier.get(db, workspace.id, tier_id)
    if not tier:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pricing tier not found")
    return crud_pricing_tier.update(db, db_obj=tier, obj_in=tier_in)


@router.delete("/{tier_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_pricing_tier(
    *,
    db: Session = Depends(deps.get_db),
    workspace: Workspace = Depends(deps.get_current_coach_workspace),
    tier_id: UUID,
) -> None:
    tier = crud_pricing_tier.get(db, workspace.id, tier_id)
    if not tier:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pricing tier not found")
    crud_pricing_tier.remove(db, db_obj=tier)
