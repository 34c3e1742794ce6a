"""
Integration tests for Events API endpoints.

Tests end-to-end flows for event management:
- Creating events with participants and reading them back
- Listing owned, participating, public and visible events
- Owner-only update and delete
- Join, leave, invite, remove participant, answer invitations
"""

import pytest
from datetime import datetime


@pytest.fixture
def create_event(test_client, auth_headers, event_payload):
    """Create an event through the API and return the response body."""

    def _create(owner, **kwargs):
        response = test_client.post(
            "/api/events", json=event_payload(**kwargs), headers=auth_headers(owner)
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create


class TestEventsCrudAPI:
    """Create, read, update and delete."""

    def test_create_then_get(self, test_client, create_event, alice, bob, auth_headers):
        created = create_event(alice, title="Launch", participants=["bob"])

        assert created["guid"].startswith("evt_")
        assert created["owner"]["username"] == "alice"
        assert sorted(p["username"] for p in created["participants"]) == ["alice", "bob"]

        response = test_client.get(f"/api/events/{created['guid']}", headers=auth_headers(alice))
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Launch"
        assert body["start_date_time"].startswith("2026-03-15T09:00:00")

    def test_create_with_unknown_participant(self, test_client, alice, auth_headers, event_payload):
        response = test_client.post(
            "/api/events",
            json=event_payload(participants=["ghost"]),
            headers=auth_headers(alice),
        )

        assert response.status_code == 400
        assert "ghost" in response.json()["detail"]
        listing = test_client.get("/api/events/mine", headers=auth_headers(alice))
        assert listing.json() == []

    def test_create_requires_auth(self, test_client, event_payload):
        assert test_client.post("/api/events", json=event_payload()).status_code == 401

    def test_create_schema_error(self, test_client, alice, auth_headers):
        response = test_client.post(
            "/api/events", json={"title": "No dates"}, headers=auth_headers(alice)
        )

        assert response.status_code == 422

    def test_private_event_not_found_for_others(
        self, test_client, create_event, alice, bob, auth_headers
    ):
        created = create_event(alice, event_type="private")

        response = test_client.get(f"/api/events/{created['guid']}", headers=auth_headers(bob))

        assert response.status_code == 404

    def test_update_by_owner(self, test_client, create_event, alice, auth_headers):
        created = create_event(alice)

        response = test_client.put(
            f"/api/events/{created['guid']}",
            json={"title": "Renamed", "location": {"city": "Plovdiv"}},
            headers=auth_headers(alice),
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Renamed"
        assert response.json()["location"]["city"] == "Plovdiv"

    def test_update_ignores_non_editable_fields(
        self, test_client, create_event, alice, bob, auth_headers
    ):
        created = create_event(alice)

        response = test_client.put(
            f"/api/events/{created['guid']}",
            json={"participants": ["bob"], "title": "Still mine"},
            headers=auth_headers(alice),
        )

        assert response.status_code == 200
        assert [p["username"] for p in response.json()["participants"]] == ["alice"]

    def test_update_invalid_times(self, test_client, create_event, alice, auth_headers):
        created = create_event(alice)

        response = test_client.put(
            f"/api/events/{created['guid']}",
            json={"end_date_time": datetime(2026, 3, 15, 8, 0).isoformat()},
            headers=auth_headers(alice),
        )

        assert response.status_code == 400

    def test_delete_by_non_owner_forbidden(
        self, test_client, create_event, alice, bob, auth_headers
    ):
        created = create_event(alice, event_type="public")

        response = test_client.delete(f"/api/events/{created['guid']}", headers=auth_headers(bob))
        assert response.status_code == 403

        still_there = test_client.get(f"/api/events/{created['guid']}", headers=auth_headers(alice))
        assert still_there.status_code == 200

    def test_delete_by_owner(self, test_client, create_event, alice, auth_headers):
        created = create_event(alice)

        response = test_client.delete(f"/api/events/{created['guid']}", headers=auth_headers(alice))
        assert response.status_code == 204

        gone = test_client.get(f"/api/events/{created['guid']}", headers=auth_headers(alice))
        assert gone.status_code == 404


class TestEventListingsAPI:
    def test_listings(self, test_client, create_event, alice, bob, carol, auth_headers):
        mine = create_event(alice, title="Mine", start=datetime(2026, 3, 1, 9, 0))
        theirs = create_event(bob, title="Theirs", participants=["alice"],
                              start=datetime(2026, 3, 2, 9, 0))
        public = create_event(carol, title="Public", event_type="public",
                              start=datetime(2026, 3, 3, 9, 0))
        create_event(carol, title="Hidden")

        headers = auth_headers(alice)

        def titles(path):
            response = test_client.get(path, headers=headers)
            assert response.status_code == 200
            return [e["title"] for e in response.json()]

        assert titles("/api/events") == ["Mine", "Theirs", "Public"]
        assert titles("/api/events/mine") == [mine["title"]]
        assert titles("/api/events/participating") == [theirs["title"]]
        assert titles("/api/events/public") == [public["title"]]

    def test_public_listing_without_token(self, test_client, create_event, alice):
        public = create_event(alice, title="Open day", event_type="public")
        create_event(alice, title="Private")

        response = test_client.get("/api/events/public")

        assert response.status_code == 200
        assert [e["guid"] for e in response.json()] == [public["guid"]]

    def test_other_listings_still_require_token(self, test_client):
        for path in ("/api/events", "/api/events/mine", "/api/events/participating"):
            assert test_client.get(path).status_code == 401


class TestParticipationAPI:
    """Join, leave, invite and remove."""

    def test_join_and_leave(self, test_client, create_event, alice, bob, auth_headers):
        created = create_event(alice, event_type="public")
        guid = created["guid"]

        joined = test_client.post(f"/api/events/{guid}/join", headers=auth_headers(bob))
        assert joined.status_code == 200
        assert sorted(p["username"] for p in joined.json()["participants"]) == ["alice", "bob"]

        again = test_client.post(f"/api/events/{guid}/join", headers=auth_headers(bob))
        assert again.status_code == 409

        left = test_client.post(f"/api/events/{guid}/leave", headers=auth_headers(bob))
        assert left.status_code == 200
        assert [p["username"] for p in left.json()["participants"]] == ["alice"]

    def test_join_private_forbidden(self, test_client, create_event, alice, bob, auth_headers):
        created = create_event(alice, event_type="private")

        response = test_client.post(f"/api/events/{created['guid']}/join", headers=auth_headers(bob))

        assert response.status_code == 403

    def test_owner_join_conflict(self, test_client, create_event, alice, auth_headers):
        created = create_event(alice, event_type="public")

        response = test_client.post(
            f"/api/events/{created['guid']}/join", headers=auth_headers(alice)
        )

        assert response.status_code == 409

    def test_invite_accept_flow(self, test_client, create_event, alice, bob, auth_headers):
        created = create_event(alice)
        guid = created["guid"]

        invited = test_client.post(
            f"/api/events/{guid}/invite", json={"username": "bob"}, headers=auth_headers(alice)
        )
        assert invited.status_code == 200
        assert [u["username"] for u in invited.json()["invitations"]] == ["bob"]

        pending = test_client.get("/api/events/invitations", headers=auth_headers(bob))
        assert [e["guid"] for e in pending.json()] == [guid]

        accepted = test_client.post(
            f"/api/events/invitations/{guid}/accept", headers=auth_headers(bob)
        )
        assert accepted.status_code == 200
        assert accepted.json()["invitations"] == []
        assert sorted(p["username"] for p in accepted.json()["participants"]) == ["alice", "bob"]

    def test_invite_reject_flow(self, test_client, create_event, alice, bob, auth_headers):
        created = create_event(alice)
        guid = created["guid"]
        test_client.post(
            f"/api/events/{guid}/invite", json={"username": "bob"}, headers=auth_headers(alice)
        )

        rejected = test_client.post(
            f"/api/events/invitations/{guid}/reject", headers=auth_headers(bob)
        )
        assert rejected.status_code == 200
        assert rejected.json()["invitations"] == []

        twice = test_client.post(
            f"/api/events/invitations/{guid}/reject", headers=auth_headers(bob)
        )
        assert twice.status_code == 404

    def test_invite_by_non_owner_and_unknown_user(
        self, test_client, create_event, alice, bob, auth_headers
    ):
        created = create_event(alice, participants=["bob"])
        guid = created["guid"]

        forbidden = test_client.post(
            f"/api/events/{guid}/invite", json={"username": "alice"}, headers=auth_headers(bob)
        )
        assert forbidden.status_code == 403

        unknown = test_client.post(
            f"/api/events/{guid}/invite", json={"username": "ghost"}, headers=auth_headers(alice)
        )
        assert unknown.status_code == 404

    def test_remove_participant(self, test_client, create_event, alice, bob, auth_headers):
        created = create_event(alice, participants=["bob"])
        guid = created["guid"]

        removed = test_client.delete(
            f"/api/events/{guid}/participants/{bob.guid}", headers=auth_headers(alice)
        )
        assert removed.status_code == 200
        assert [p["username"] for p in removed.json()["participants"]] == ["alice"]

        owner = test_client.delete(
            f"/api/events/{guid}/participants/{alice.guid}", headers=auth_headers(alice)
        )
        assert owner.status_code == 400
