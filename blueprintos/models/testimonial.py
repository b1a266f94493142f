import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, SmallInteger, Text, Uuid, func
from sqlalchemy.orm import relationship
from blueprintos.db.base_class import Base


class Testimonial(Base):
    __tablename__ = "testimonials"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    workspace_id = Column(Uuid(as_uuid=True), ForeignKey("workspaces.id"), nullable=False, index=True)
    client_id = Column(Uuid(as_uuid=True), nullable=True)
    client_name = Column(String, nullable=False)
    client_title = Column(String, nullable=False, default="")
    testimonial_text = Column(Text, nullable=False)
    rating = Column(SmallInteger, nullable=False, default=5)   # 1-5, not validated
    image_url = Column(String(500), nullable=True)
    is_approved = Column(Boolean, nullable=False, default=False)   # public display gate
    is_featured = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    workspace = relationship("Workspace", back_populates="testimonials")
