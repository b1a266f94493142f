import enum
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text, Uuid, func
from sqlalchemy.orm import relationship
from blueprintos.db.base_class import Base


class ProfileRole(str, enum.Enum):
    COACH = "coach"
    CLIENT = "client"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the identity provider user
    id = Column(Uuid(as_uuid=True), primary_key=True, index=True)
    role = Column(String, nullable=False, default=ProfileRole.CLIENT.value)
    full_name = Column(String, nullable=False, default="")
    avatar_url = Column(String(500), nullable=True)
    bio = Column(Text, nullable=False, default="")
    timezone = Column(String, nullable=False, default="UTC")
    phone = Column(String, nullable=True)
    onboarding_completed = Column(Boolean, nullable=False, default=False)

    workspace_id = Column(Uuid(as_uuid=True), ForeignKey("workspaces.id"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    workspace = relationship("Workspace", back_populates="profiles")

    @property
    def is_coach(self) -> bool:
        return self.role == ProfileRole.COACH.value
