from typing import List, Optional
from uuid import UUID
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field


# Shared properties
class PricingTierBase(BaseModel):
    name: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    duration_weeks: Optional[int] = Field(default=None, gt=0)
    features: Optional[List[str]] = None
    is_featured: Optional[bool] = None
    order_index: Optional[int] = None
    is_active: Optional[bool] = None


# Properties to receive via API on creation
class PricingTierCreate(PricingTierBase):
    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0)
    duration_weeks: int = Field(default=12, gt=0)
    features: List[str] = Field(default_factory=list)


# Properties to receive via API on update
class PricingTierUpdate(PricingTierBase):
    pass


class PricingTier(PricingTierBase):
    id: UUID
    workspace_id: UUID
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
