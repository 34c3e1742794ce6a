"""
Unit tests for ContactListService.
"""

import pytest

from backend.src.models import ContactList
from backend.src.services.contact_list_service import ContactListService
from backend.src.services.exceptions import ForbiddenError, NotFoundError, ValidationError


@pytest.fixture
def contact_service(test_db_session):
    """Create a ContactListService instance for testing."""
    return ContactListService(test_db_session)


class TestContactListService:
    """Tests for contact list management."""

    def test_create_and_list(self, contact_service, alice, bob, carol, actor_for):
        created = contact_service.create(actor_for(alice), " Friends ", ["carol", "bob"])

        assert created.guid.startswith("cnl_")
        assert created.title == "Friends"
        assert [u.username for u in created.contacts] == ["bob", "carol"]
        assert [c.id for c in contact_service.list_mine(actor_for(alice))] == [created.id]
        assert contact_service.list_mine(actor_for(bob)) == []

    def test_create_with_unknown_username(
        self, contact_service, alice, actor_for, test_db_session
    ):
        with pytest.raises(ValidationError) as exc_info:
            contact_service.create(actor_for(alice), "Friends", ["ghost"])

        assert exc_info.value.field == "usernames"
        assert test_db_session.query(ContactList).count() == 0

    def test_create_with_blank_title(self, contact_service, alice, actor_for):
        with pytest.raises(ValidationError):
            contact_service.create(actor_for(alice), "   ", [])

    def test_remove_contact(self, contact_service, alice, bob, carol, actor_for):
        contact_list = contact_service.create(actor_for(alice), "Friends", ["bob", "carol"])

        result = contact_service.remove_contact(actor_for(alice), contact_list.guid, bob.guid)
        assert [u.username for u in result.contacts] == ["carol"]

        with pytest.raises(NotFoundError):
            contact_service.remove_contact(actor_for(alice), contact_list.guid, bob.guid)

    def test_only_creator_can_modify(self, contact_service, alice, bob, actor_for):
        contact_list = contact_service.create(actor_for(alice), "Friends", ["bob"])

        with pytest.raises(ForbiddenError):
            contact_service.remove_contact(actor_for(bob), contact_list.guid, bob.guid)
        with pytest.raises(ForbiddenError):
            contact_service.delete(actor_for(bob), contact_list.guid)

    def test_delete(self, contact_service, alice, actor_for, test_db_session):
        contact_list = contact_service.create(actor_for(alice), "Empty", [])

        contact_service.delete(actor_for(alice), contact_list.guid)

        assert test_db_session.query(ContactList).count() == 0
        with pytest.raises(NotFoundError):
            contact_service.delete(actor_for(alice), contact_list.guid)
