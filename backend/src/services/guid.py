"""
GUID service for entity identification.

Provides utilities for generating, encoding, decoding, and validating
Global Unique Identifiers used in URLs and API responses.

GUID Format: {prefix}_{base32_uuid}
- prefix: 3-character entity type identifier (usr, evt, ser, cnl, drq)
- base32_uuid: 26-character Crockford Base32 encoded UUIDv7
"""

import re
import uuid

import base32_crockford
from uuid_extensions import uuid7

# Prefix mappings for entity types
#   usr - User
#   evt - Event (calendar event)
#   ser - EventSeries (template-based series)
#   cnl - ContactList
#   drq - DeleteRequest (account deletion workflow)
ENTITY_PREFIXES = {
    "usr": "User",
    "evt": "Event",
    "ser": "EventSeries",
    "cnl": "ContactList",
    "drq": "DeleteRequest",
}

# Pattern for validating GUIDs
# Format: {3-char prefix}_{26-char Crockford Base32}
GUID_PATTERN = re.compile(
    r"^(usr|evt|ser|cnl|drq)_[0-9A-HJKMNP-TV-Za-hjkmnp-tv-z]{26}$",
    re.IGNORECASE
)


class GuidService:
    """
    Service for GUID operations.

    Provides static methods for:
    - Generating new UUIDv7 values
    - Encoding UUIDs to GUID strings
    - Decoding GUID strings to UUIDs
    - Validating GUID format
    """

    @staticmethod
    def generate_uuid() -> uuid.UUID:
        """
        Generate a new UUIDv7 value.

        UUIDv7 is time-ordered for better database indexing performance.

        Returns:
            New UUID object
        """
        return uuid7()

    @staticmethod
    def encode_uuid(uuid_value: uuid.UUID, prefix: str) -> str:
        """
        Encode a UUID to a GUID string.

        Args:
            uuid_value: UUID to encode
            prefix: Entity type prefix (usr, evt, ser, cnl, drq)

        Returns:
            GUID string (e.g., "evt_01hgw2bbg...")

        Raises:
            ValueError: If prefix is invalid
        """
        if prefix not in ENTITY_PREFIXES:
            raise ValueError(
                f"Invalid prefix '{prefix}'. "
                f"Valid prefixes: {', '.join(ENTITY_PREFIXES.keys())}"
            )

        if isinstance(uuid_value, bytes):
            uuid_int = int.from_bytes(uuid_value, "big")
        else:
            uuid_int = int.from_bytes(uuid_value.bytes, "big")

        encoded = base32_crockford.encode(uuid_int)
        # Pad to 26 characters
        encoded = encoded.zfill(26)
        return f"{prefix}_{encoded.lower()}"

    @staticmethod
    def decode_guid(guid: str) -> tuple[str, uuid.UUID]:
        """
        Decode a GUID string to its components.

        Args:
            guid: GUID string (e.g., "evt_01HGW2BBG...")

        Returns:
            Tuple of (prefix, UUID)

        Raises:
            ValueError: If the GUID format is invalid
        """
        if not guid:
            raise ValueError("GUID cannot be empty")

        if not GUID_PATTERN.match(guid):
            raise ValueError(
                f"Invalid GUID format: {guid}. "
                f"Expected format: {{prefix}}_{{26-char base32}}"
            )

        prefix = guid[:3].lower()
        encoded_part = guid[4:]  # Skip "xxx_"

        try:
            uuid_int = base32_crockford.decode(encoded_part.upper())
            uuid_bytes = uuid_int.to_bytes(16, "big")
            return prefix, uuid.UUID(bytes=uuid_bytes)
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid GUID encoding: {e}")

    @staticmethod
    def validate_guid(guid: str, expected_prefix: str = None) -> bool:
        """
        Validate a GUID format.

        Args:
            guid: GUID string to validate
            expected_prefix: Optional expected prefix for type checking

        Returns:
            True if valid, False otherwise
        """
        if not guid:
            return False

        if not GUID_PATTERN.match(guid):
            return False

        if expected_prefix:
            prefix = guid[:3].lower()
            return prefix == expected_prefix.lower()

        return True

    @staticmethod
    def parse_guid(guid: str, expected_prefix: str) -> uuid.UUID:
        """
        Parse a GUID string to UUID, validating the prefix.

        Args:
            guid: GUID string
            expected_prefix: Expected entity prefix

        Returns:
            UUID object

        Raises:
            ValueError: If format invalid or prefix doesn't match
        """
        if not GuidService.validate_guid(guid, expected_prefix):
            raise ValueError(
                f"Invalid {ENTITY_PREFIXES.get(expected_prefix, 'entity')} "
                f"identifier: {guid}"
            )
        _prefix, uuid_value = GuidService.decode_guid(guid)
        return uuid_value
