import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Text, JSON, Uuid, func
from sqlalchemy.orm import relationship
from blueprintos.db.base_class import Base
from blueprintos.services.landing_page import default_landing_page_config

ONBOARDING_STEPS = ("step1", "step2", "step3", "step4", "step5", "step6")


def default_onboarding_steps() -> dict:
    return {step: False for step in ONBOARDING_STEPS}


class Workspace(Base):
    __tablename__ = "workspaces"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String, nullable=False)
    subdomain = Column(String(63), unique=True, nullable=False, index=True)
    custom_domain = Column(String(255), unique=True, nullable=True, index=True)
    owner_id = Column(Uuid(as_uuid=True), nullable=True, index=True)   # identity provider user id

    # ── Branding ──
    logo_url = Column(String(500), nullable=True)
    primary_color = Column(String(7), nullable=False, default="#3B82F6")
    secondary_color = Column(String(7), nullable=False, default="#8B5CF6")
    tagline = Column(String, nullable=False, default="")
    about_text = Column(Text, nullable=False, default="")

    landing_page_config = Column(JSON, nullable=False, default=default_landing_page_config)
    onboarding_steps = Column(JSON, nullable=False, default=default_onboarding_steps)

    is_active = Column(Boolean, nullable=False, default=True)   # inactive workspaces never resolve
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    pricing_tiers = relationship("PricingTier", back_populates="workspace", order_by="PricingTier.order_index")
    testimonials = relationship("Testimonial", back_populates="workspace")
    landing_page_prompts = relationship("LandingPagePrompt", back_populates="workspace")
    subscription = relationship("WorkspaceSubscription", back_populates="workspace", uselist=False)
    features = relationship("WorkspaceFeatures", back_populates="workspace", uselist=False)
    profiles = relationship("Profile", back_populates="workspace")
