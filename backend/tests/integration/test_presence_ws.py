"""
Integration tests for the presence WebSocket and the service endpoints.
"""

import pytest
from starlette.websockets import WebSocketDisconnect

from backend.src.api.presence import WS_CLOSE_UNAUTHORIZED
from backend.src.utils.websocket import get_presence_manager


class TestPresenceWebSocket:
    def test_rejects_missing_token(self, test_client):
        with test_client.websocket_connect("/ws/presence") as websocket:
            with pytest.raises(WebSocketDisconnect) as exc_info:
                websocket.receive_text()

        assert exc_info.value.code == WS_CLOSE_UNAUTHORIZED

    def test_rejects_invalid_token(self, test_client, mocker):
        mocker.patch(
            "backend.src.api.presence.get_websocket_actor_context",
            new=mocker.AsyncMock(return_value=None),
        )

        with test_client.websocket_connect("/ws/presence?token=bad") as websocket:
            with pytest.raises(WebSocketDisconnect) as exc_info:
                websocket.receive_text()

        assert exc_info.value.code == WS_CLOSE_UNAUTHORIZED

    def test_join_room_and_ping(self, test_client, alice, actor_for, mocker):
        mocker.patch(
            "backend.src.api.presence.get_websocket_actor_context",
            new=mocker.AsyncMock(return_value=actor_for(alice)),
        )

        with test_client.websocket_connect("/ws/presence?token=any") as websocket:
            websocket.send_text("ping")
            assert websocket.receive_text() == "pong"

            websocket.send_text("not json")
            websocket.send_json({"type": "join-room"})
            assert websocket.receive_json() == {"type": "joined", "room": alice.guid}
            assert get_presence_manager().is_online(alice.guid)

    def test_token_resolved_with_short_lived_session(self, test_client, alice, mocker):
        session_factory = mocker.patch("backend.src.db.database.SessionLocal")
        session_factory.return_value = mocker.MagicMock()
        mocker.patch(
            "backend.src.middleware.actor._user_from_token", return_value=alice
        )

        with test_client.websocket_connect("/ws/presence?token=abc") as websocket:
            websocket.send_json({"type": "join-room"})
            assert websocket.receive_json()["room"] == alice.guid

        session_factory.return_value.close.assert_called_once()


class TestServiceEndpoints:
    def test_health(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["service"] == "eventcal-backend"

    def test_root(self, test_client):
        response = test_client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"
