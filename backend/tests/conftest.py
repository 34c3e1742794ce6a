"""
Pytest configuration and fixtures for backend tests.

Provides shared fixtures for:
- Test database sessions (in-memory SQLite)
- User factories and actor contexts
- Authenticated FastAPI test client helpers
- Event and series payload factories
"""

import os
import itertools
import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app modules
os.environ['EVENTCAL_DB_URL'] = 'sqlite:///:memory:'
os.environ['JWT_SECRET_KEY'] = 'test-secret-key-that-is-long-enough-for-hs256'
os.environ['RATE_LIMIT_ENABLED'] = 'false'

from backend.src.config.settings import get_settings
from backend.src.middleware.actor import ActorContext
from backend.src.models import Base, User, UserRole
from backend.src.services.token_service import TokenService
from backend.src.utils.crypto import hash_password


TEST_PASSWORD = "secret123"

# Computing a bcrypt hash per user is slow; every factory user shares this one
_TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD, rounds=4)

_phone_numbers = itertools.count(100000000)


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture(scope='function')
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    from sqlalchemy import event

    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )

    # Enable foreign key constraints for SQLite (user deletion cascades)
    def _fk_pragma_on_connect(dbapi_con, con_record):
        dbapi_con.execute('pragma foreign_keys=ON')

    event.listen(engine, 'connect', _fk_pragma_on_connect)

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope='function')
def test_db_session(test_db_engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ============================================================================
# User Fixtures
# ============================================================================

@pytest.fixture
def sample_user(test_db_session):
    """Factory for creating User models in the database."""

    def _create(
        username='alice',
        email=None,
        first_name='Alice',
        last_name='Smith',
        role=UserRole.USER.value,
        is_blocked=False,
        phone_number=None,
    ):
        user = User(
            username=username,
            email=email or f'{username}@example.com',
            password_hash=_TEST_PASSWORD_HASH,
            phone_number=phone_number or f'0{next(_phone_numbers)}',
            first_name=first_name,
            last_name=last_name,
            role=role,
            is_blocked=is_blocked,
        )
        test_db_session.add(user)
        test_db_session.commit()
        test_db_session.refresh(user)
        return user

    return _create


@pytest.fixture
def actor_for():
    """Build the ActorContext of a user."""

    def _build(user):
        return ActorContext(
            user_id=user.id,
            user_guid=user.guid,
            username=user.username,
            role=user.role,
        )

    return _build


@pytest.fixture
def alice(sample_user):
    return sample_user(username='alice', first_name='Alice')


@pytest.fixture
def bob(sample_user):
    return sample_user(username='bob', first_name='Bob', last_name='Jones')


@pytest.fixture
def carol(sample_user):
    return sample_user(username='carol', first_name='Carol', last_name='White')


@pytest.fixture
def admin_user(sample_user):
    return sample_user(
        username='admin',
        first_name='Ada',
        last_name='Admin',
        role=UserRole.ADMIN.value,
    )


# ============================================================================
# Payload Factories
# ============================================================================

@pytest.fixture
def event_payload():
    """Factory for event creation payloads (dicts accepted by EventCreate)."""

    def _create(
        title='Team offsite',
        event_type='private',
        start=datetime(2026, 3, 15, 9, 0),
        duration=timedelta(hours=2),
        participants=None,
        **extra,
    ):
        payload = {
            'title': title,
            'description': 'Quarterly planning',
            'type': event_type,
            'start_date_time': start.isoformat(),
            'end_date_time': (start + duration).isoformat(),
            'participants': participants or [],
        }
        payload.update(extra)
        return payload

    return _create


@pytest.fixture
def series_payload():
    """Factory for series creation payloads (dicts accepted by EventSeriesCreate)."""

    def _template(day, hour=9, minute=0, end_hour=10, end_minute=0):
        return {
            'title': 'Standup',
            'description': 'Daily sync',
            'start_date_time': day.isoformat(),
            'start_time': {'hour': hour, 'minute': minute},
            'end_time': {'hour': end_hour, 'minute': end_minute},
        }

    def _create(
        name='Morning standup',
        series_type='recurring',
        frequency='daily',
        first_day=datetime(2026, 3, 2),
        last_day=datetime(2026, 3, 6),
        is_indefinite=False,
        **extra,
    ):
        payload = {
            'name': name,
            'series_type': series_type,
            'is_indefinite': is_indefinite,
            'starting_event': _template(first_day),
            'ending_event': None if is_indefinite else _template(last_day),
            'recurrence_rule': {'frequency': frequency} if frequency else None,
        }
        payload.update(extra)
        return payload

    return _create


# ============================================================================
# API Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def disable_rate_limit():
    """Keep the login/register limiter out of the way of API tests."""
    from backend.src.api.auth import limiter

    previous = limiter.enabled
    limiter.enabled = False
    yield
    limiter.enabled = previous


@pytest.fixture
def auth_headers():
    """Build an Authorization header for a user."""
    token_service = TokenService(get_settings())

    def _headers(user):
        token, _ = token_service.generate_token(user)
        return {'Authorization': f'Bearer {token}'}

    return _headers


@pytest.fixture
def test_client(test_db_session):
    """Create a test client for the FastAPI application."""
    from fastapi.testclient import TestClient
    from backend.src.main import app
    from backend.src.db.database import get_db

    def get_test_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = get_test_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
