"""
ContactList model for named groups of users.

A contact list belongs to its creator and references other users; it is
used by the client to pick participants and invitees quickly.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


contact_list_members = Table(
    "contact_list_members",
    Base.metadata,
    Column(
        "contact_list_id",
        Integer,
        ForeignKey("contact_lists.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class ContactList(Base, GuidMixin):
    """
    Contact list model.

    Attributes:
        id: Primary key (internal, never exposed)
        guid: GUID string property (cnl_xxx, inherited from GuidMixin)
        title: List title
        creator_id: FK to the owning user
        contacts: Users in the list (many-to-many)
    """

    __tablename__ = "contact_lists"

    GUID_PREFIX = "cnl"

    id = Column(Integer, primary_key=True, autoincrement=True)

    creator_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    title = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    creator = relationship("User", back_populates="contact_lists")
    contacts = relationship(
        "User",
        secondary=contact_list_members,
        lazy="selectin",
        order_by="User.username",
    )

    def __repr__(self) -> str:
        return f"<ContactList(id={self.id}, title='{self.title}')>"
