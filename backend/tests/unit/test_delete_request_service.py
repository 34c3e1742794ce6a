"""
Unit tests for DeleteRequestService.

Tests filing, reopening, approving (user deleted, username kept) and
rejecting account deletion requests.
"""

import pytest

from backend.src.models import DEFAULT_DELETE_REASON, DeleteRequest, User
from backend.src.services.delete_request_service import DeleteRequestService
from backend.src.services.exceptions import ConflictError, NotFoundError


@pytest.fixture
def delete_request_service(test_db_session):
    """Create a DeleteRequestService instance for testing."""
    return DeleteRequestService(test_db_session)


class TestRequestDeletion:
    def test_request_with_default_reason(self, delete_request_service, alice, actor_for):
        request = delete_request_service.request_deletion(actor_for(alice))

        assert request.guid.startswith("drq_")
        assert request.status == "pending"
        assert request.username == "alice"
        assert request.reason == DEFAULT_DELETE_REASON

    def test_pending_request_conflicts(self, delete_request_service, alice, actor_for):
        delete_request_service.request_deletion(actor_for(alice), "Moving away")

        with pytest.raises(ConflictError):
            delete_request_service.request_deletion(actor_for(alice))

    def test_rejected_request_is_reopened(
        self, delete_request_service, alice, actor_for, test_db_session
    ):
        first = delete_request_service.request_deletion(actor_for(alice))
        delete_request_service.reject(first.guid)

        again = delete_request_service.request_deletion(actor_for(alice), "Changed my mind")

        assert again.id == first.id
        assert again.status == "pending"
        assert again.reason == "Changed my mind"
        assert test_db_session.query(DeleteRequest).count() == 1


class TestReview:
    def test_approve_deletes_user_and_keeps_username(
        self, delete_request_service, alice, actor_for, test_db_session
    ):
        request = delete_request_service.request_deletion(actor_for(alice))

        processed = delete_request_service.approve(request.guid)

        assert processed.status == "processed"
        assert processed.user_id is None
        assert processed.username == "alice"
        assert test_db_session.query(User).count() == 0

    def test_reject(self, delete_request_service, alice, actor_for, test_db_session):
        request = delete_request_service.request_deletion(actor_for(alice))

        rejected = delete_request_service.reject(request.guid)

        assert rejected.status == "rejected"
        assert test_db_session.query(User).count() == 1

    def test_review_twice_conflicts(self, delete_request_service, alice, actor_for):
        request = delete_request_service.request_deletion(actor_for(alice))
        delete_request_service.reject(request.guid)

        with pytest.raises(ConflictError):
            delete_request_service.approve(request.guid)

    def test_unknown_request(self, delete_request_service):
        with pytest.raises(NotFoundError):
            delete_request_service.approve("drq_00000000000000000000000000")

    def test_list_all_filters_by_status(
        self, delete_request_service, alice, bob, actor_for
    ):
        first = delete_request_service.request_deletion(actor_for(alice))
        delete_request_service.request_deletion(actor_for(bob))
        delete_request_service.reject(first.guid)

        assert len(delete_request_service.list_all()) == 2
        pending = delete_request_service.list_all(status="pending")
        assert [r.username for r in pending] == ["bob"]
