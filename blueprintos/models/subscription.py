"""
Workspace subscription + feature limit records.

Both rows are created during provisioning; payment processing is not handled
here, so plan changes only ever come from an operator.
"""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer, Numeric, Uuid, func
from sqlalchemy.orm import relationship
from blueprintos.db.base_class import Base


class WorkspaceSubscription(Base):
    __tablename__ = "workspace_subscriptions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    workspace_id = Column(Uuid(as_uuid=True), ForeignKey("workspaces.id"), nullable=False, unique=True)
    plan_tier = Column(String, nullable=False, default="starter")        # starter, pro, enterprise
    status = Column(String, nullable=False, default="trialing")          # active, past_due, cancelled, trialing
    billing_cycle = Column(String, nullable=False, default="monthly")    # monthly, annual
    mrr = Column(Numeric(10, 2), nullable=False, default=0)
    trial_ends_at = Column(DateTime(timezone=True), nullable=True)
    current_period_start = Column(DateTime(timezone=True), nullable=True)
    current_period_end = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    workspace = relationship("Workspace", back_populates="subscription")


class WorkspaceFeatures(Base):
    __tablename__ = "workspace_features"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    workspace_id = Column(Uuid(as_uuid=True), ForeignKey("workspaces.id"), nullable=False, unique=True)
    max_clients = Column(Integer, nullable=False, default=10)
    custom_domain_enabled = Column(Boolean, nullable=False, default=False)
    white_label_enabled = Column(Boolean, nullable=False, default=False)
    api_access_enabled = Column(Boolean, nullable=False, default=False)
    team_members_enabled = Column(Boolean, nullable=False, default=False)
    ai_generation_credits = Column(Integer, nullable=False, default=10)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    workspace = relationship("Workspace", back_populates="features")
