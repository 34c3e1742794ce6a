"""
Contact list service.

Contact lists are private to their creator: only the creator can list,
delete or edit them. Members are resolved by username when the list is
created; one unknown username rejects the whole list.
"""

from typing import List

from sqlalchemy.orm import Session

from backend.src.middleware.actor import ActorContext
from backend.src.models import ContactList
from backend.src.services.exceptions import ForbiddenError, NotFoundError, ValidationError
from backend.src.services.guid import GuidService
from backend.src.services.user_service import UserService
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


class ContactListService:
    """
    Service for managing contact lists.

    Usage:
        >>> service = ContactListService(db_session)
        >>> contact_list = service.create(actor, "Family", ["alice", "bob"])
    """

    def __init__(self, db: Session):
        self.db = db
        self.user_service = UserService(db)

    def _load(self, guid: str) -> ContactList:
        try:
            uuid_value = GuidService.parse_guid(guid, "cnl")
        except ValueError:
            raise NotFoundError("ContactList", guid)

        contact_list = (
            self.db.query(ContactList).filter(ContactList.uuid == uuid_value).first()
        )
        if not contact_list:
            raise NotFoundError("ContactList", guid)
        return contact_list

    def _require_creator(self, contact_list: ContactList, actor: ActorContext) -> None:
        if contact_list.creator_id != actor.user_id:
            raise ForbiddenError("Only the list creator can modify this contact list")

    def create(self, actor: ActorContext, title: str, usernames: List[str]) -> ContactList:
        """
        Create a contact list.

        Raises:
            ValidationError: If the title is blank or a username is unknown
        """
        if not title or not title.strip():
            raise ValidationError("Title cannot be empty", field="title")

        try:
            contacts = self.user_service.resolve_usernames(usernames)
        except ValidationError as e:
            raise ValidationError(e.message, field="usernames")

        contact_list = ContactList(title=title.strip(), creator_id=actor.user_id)
        contact_list.contacts = contacts
        self.db.add(contact_list)
        self.db.commit()
        self.db.refresh(contact_list)

        logger.info(
            f"Created contact list: {contact_list.title} ({contact_list.guid})",
            extra={"user_guid": actor.user_guid, "contacts": len(contacts)}
        )
        return contact_list

    def list_mine(self, actor: ActorContext) -> List[ContactList]:
        """List the actor's contact lists ordered by title."""
        return (
            self.db.query(ContactList)
            .filter(ContactList.creator_id == actor.user_id)
            .order_by(ContactList.title, ContactList.id)
            .all()
        )

    def delete(self, actor: ActorContext, guid: str) -> None:
        """
        Delete a contact list.

        Raises:
            NotFoundError: If list not found
            ForbiddenError: If the actor is not the creator
        """
        contact_list = self._load(guid)
        self._require_creator(contact_list, actor)

        self.db.delete(contact_list)
        self.db.commit()
        logger.info(f"Deleted contact list {guid}")

    def remove_contact(self, actor: ActorContext, guid: str, user_guid: str) -> ContactList:
        """
        Remove one user from a contact list.

        Raises:
            NotFoundError: If list not found or the user is not in it
            ForbiddenError: If the actor is not the creator
        """
        contact_list = self._load(guid)
        self._require_creator(contact_list, actor)

        contact = next((u for u in contact_list.contacts if u.guid == user_guid), None)
        if contact is None:
            raise NotFoundError("Contact", user_guid)

        contact_list.contacts.remove(contact)
        self.db.commit()
        self.db.refresh(contact_list)

        logger.info(f"Removed {contact.username} from contact list {guid}")
        return contact_list
