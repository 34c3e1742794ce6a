"""
DeleteRequest model for the self-service account deletion workflow.

Lifecycle:
- pending: created by the user
- processed: approved by an admin; the user row is deleted and user_id
  becomes NULL while the username snapshot is kept
- rejected: declined by an admin; the user may request again, which
  reopens the same row
"""

import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


DEFAULT_DELETE_REASON = "User requested account deletion"


class DeleteRequestStatus(enum.Enum):
    """Delete request lifecycle status."""
    PENDING = "pending"
    PROCESSED = "processed"
    REJECTED = "rejected"


class DeleteRequest(Base, GuidMixin):
    """
    Account deletion request.

    Attributes:
        id: Primary key (internal, never exposed)
        guid: GUID string property (drq_xxx, inherited from GuidMixin)
        user_id: FK to the requesting user (unique, NULL once processed)
        username: Username snapshot taken at request time
        requested_at: When the request was (re)opened
        status: pending, processed or rejected
        reason: Free-text reason
    """

    __tablename__ = "delete_requests"

    GUID_PREFIX = "drq"

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        unique=True,
    )
    username = Column(String(50), nullable=False)
    requested_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    status = Column(
        String(20),
        nullable=False,
        default=DeleteRequestStatus.PENDING.value,
        index=True
    )
    reason = Column(String(500), nullable=False, default=DEFAULT_DELETE_REASON)

    user = relationship("User")

    def __repr__(self) -> str:
        return (
            f"<DeleteRequest(id={self.id}, username='{self.username}', "
            f"status='{self.status}')>"
        )
