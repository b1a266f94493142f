from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from blueprintos.models.testimonial import Testimonial


def get_approved(db: Session, workspace_id: UUID) -> List[Testimonial]:
    """Publicly displayable testimonials, newest first."""
    return db.query(Testimonial).filter(
        Testimonial.workspace_id == workspace_id,
        Testimonial.is_approved == True,  # noqa: E712
    ).order_by(Testimonial.created_at.desc()).all()
