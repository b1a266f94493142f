import uuid
from sqlalchemy import Column, Boolean, DateTime, ForeignKey, Text, JSON, Uuid, func
from sqlalchemy.orm import relationship
from blueprintos.db.base_class import Base


class LandingPagePrompt(Base):
    """Audit row of a landing page generation. One active row per workspace."""
    __tablename__ = "landing_page_prompts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    workspace_id = Column(Uuid(as_uuid=True), ForeignKey("workspaces.id"), nullable=False, index=True)
    prompt_text = Column(Text, nullable=False, default="")
    generated_config = Column(JSON, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    workspace = relationship("Workspace", back_populates="landing_page_prompts")
