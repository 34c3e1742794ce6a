"""
Unit tests for password hashing, GUIDs, search patterns and the presence manager.
"""

import asyncio
import uuid
import pytest
from unittest.mock import AsyncMock, MagicMock

from backend.src.services.guid import GuidService
from backend.src.utils.crypto import hash_password, verify_password
from backend.src.utils.search import contains_pattern
from backend.src.utils.websocket import PresenceManager, get_presence_manager


class TestPasswordHashing:
    def test_hash_and_verify(self):
        password_hash = hash_password("secret123", rounds=4)

        assert password_hash.startswith("$2")
        assert verify_password("secret123", password_hash) is True
        assert verify_password("Secret123", password_hash) is False

    def test_hash_is_salted(self):
        assert hash_password("secret123", rounds=4) != hash_password("secret123", rounds=4)

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            hash_password("")

    def test_verify_bad_input(self):
        assert verify_password("", "$2b$04$abc") is False
        assert verify_password("secret123", "not-a-hash") is False


class TestGuidService:
    def test_encode_parse_round_trip(self):
        value = GuidService.generate_uuid()
        guid = GuidService.encode_uuid(value, "evt")

        assert guid.startswith("evt_")
        assert len(guid) == 30
        assert GuidService.parse_guid(guid, "evt") == value

    def test_parse_accepts_uppercase(self):
        value = uuid.UUID(int=12345)
        guid = GuidService.encode_uuid(value, "usr")

        assert GuidService.parse_guid(guid.upper().replace("USR_", "usr_"), "usr") == value

    def test_wrong_prefix_rejected(self):
        guid = GuidService.encode_uuid(GuidService.generate_uuid(), "evt")

        with pytest.raises(ValueError):
            GuidService.parse_guid(guid, "ser")

    def test_unknown_prefix_rejected(self):
        with pytest.raises(ValueError):
            GuidService.encode_uuid(uuid.uuid4(), "xyz")

    @pytest.mark.parametrize("guid", ["", "evt", "evt_short", "evt-01hgw2bbg0000000000000001"])
    def test_invalid_format(self, guid):
        assert GuidService.validate_guid(guid) is False


def _socket():
    websocket = MagicMock()
    websocket.send_json = AsyncMock()
    return websocket


class TestContainsPattern:
    def test_plain_text_lowercased_and_trimmed(self):
        assert contains_pattern("  Alice ") == "%alice%"

    def test_wildcards_escaped(self):
        assert contains_pattern("50%_off") == r"%50\%\_off%"

    def test_escape_character_doubled(self):
        assert contains_pattern("a\\b") == r"%a\\b%"


class TestPresenceManager:
    def test_join_and_leave(self):
        manager = PresenceManager()
        first, second = _socket(), _socket()

        asyncio.run(manager.join("usr_a", first))
        asyncio.run(manager.join("usr_a", second))
        asyncio.run(manager.join("usr_a", second))

        assert manager.is_online("usr_a")
        assert not manager.is_online("usr_b")

        manager.leave("usr_a", first)
        assert manager.is_online("usr_a")

        manager.leave("usr_a", second)
        assert not manager.is_online("usr_a")

    def test_leave_unknown_room_is_noop(self):
        PresenceManager().leave("usr_missing", _socket())

    def test_global_manager_is_singleton(self):
        assert get_presence_manager() is get_presence_manager()
