import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer, Numeric, JSON, Uuid, func
from sqlalchemy.orm import relationship
from blueprintos.db.base_class import Base


class PricingTier(Base):
    """A coaching offer shown in the pricing section of the landing page."""
    __tablename__ = "pricing_tiers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    workspace_id = Column(Uuid(as_uuid=True), ForeignKey("workspaces.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="usd")
    duration_weeks = Column(Integer, nullable=False, default=12)
    features = Column(JSON, nullable=False, default=list)
    is_featured = Column(Boolean, nullable=False, default=False)   # at most one per workspace, see crud
    order_index = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    workspace = relationship("Workspace", back_populates="pricing_tiers")
