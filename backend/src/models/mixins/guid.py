"""
GUID mixin for SQLAlchemy models.

Provides UUID-based Global Unique Identifiers for user-facing entities.
Uses UUIDv7 (time-ordered) with Crockford's Base32 encoding for URL-safe,
human-readable identifiers.

GUID Format: {prefix}_{base32_uuid}
Examples:
    - usr_01hgw2bbg0000000000000000 (User)
    - evt_01hgw2bbg0000000000000001 (Event)
    - ser_01hgw2bbg0000000000000002 (EventSeries)
"""

import uuid as uuid_module
from typing import ClassVar, Optional

from sqlalchemy import Column, TypeDecorator, LargeBinary
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from uuid_extensions import uuid7

from backend.src.services.guid import GuidService


class UUIDType(TypeDecorator):
    """
    Platform-independent UUID type.

    Uses PostgreSQL's native UUID type when available,
    otherwise stores as 16-byte LargeBinary for SQLite.

    Always presents as a Python UUID object.
    """

    impl = LargeBinary
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(LargeBinary(16))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if not isinstance(value, uuid_module.UUID):
            value = (
                uuid_module.UUID(bytes=value)
                if isinstance(value, bytes)
                else uuid_module.UUID(str(value))
            )
        if dialect.name == 'postgresql':
            return value
        return value.bytes

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid_module.UUID):
            return value
        if isinstance(value, bytes):
            return uuid_module.UUID(bytes=value)
        return uuid_module.UUID(str(value))


class GuidMixin:
    """
    Mixin providing GUID (Global Unique Identifier) support for entities.

    Adds:
    - uuid: Binary UUID column (UUIDv7, time-ordered)
    - guid: Property returning prefixed Base32 string
    - parse_guid: Class method to decode GUID strings

    Usage:
        class Event(Base, GuidMixin):
            GUID_PREFIX = "evt"

        event = Event(...)
        print(event.guid)  # evt_01hgw2bbg...
    """

    # Subclasses must define their 3-character prefix
    GUID_PREFIX: ClassVar[str]

    uuid = Column(
        UUIDType(),
        nullable=False,
        unique=True,
        index=True,
        default=uuid7,
    )

    @property
    def guid(self) -> Optional[str]:
        """
        Get the full GUID with prefix, or None before the row is flushed.
        """
        if self.uuid is None:
            return None
        return GuidService.encode_uuid(self.uuid, self.GUID_PREFIX)

    @classmethod
    def parse_guid(cls, guid: str) -> uuid_module.UUID:
        """
        Parse a GUID string of this entity type to a UUID object.

        Raises:
            ValueError: If the GUID format is invalid or prefix doesn't match
        """
        return GuidService.parse_guid(guid, cls.GUID_PREFIX)
