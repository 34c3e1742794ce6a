"""Initial Eventcal schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

Creates every table of the calendar backend:
- users: registered people (GUID usr_xxx)
- event_series: recurring or manual series (GUID ser_xxx)
- events: calendar events (GUID evt_xxx), optionally inside a manual series
- event_participants / event_invitations: user-event association tables
- contact_lists / contact_list_members: saved groups of users (GUID cnl_xxx)
- delete_requests: account deletion requests (GUID drq_xxx)
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _uuid_column():
    return sa.Column(
        'uuid',
        postgresql.UUID(as_uuid=True).with_variant(sa.LargeBinary(16), 'sqlite'),
        nullable=False
    )


def upgrade() -> None:
    """Create all tables and their indexes."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('phone_number', sa.String(length=20), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=30), nullable=False),
        sa.Column('last_name', sa.String(length=30), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='user'),
        sa.Column('avatar', sa.String(length=1024), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('is_blocked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('phone_number'),
    )
    op.create_index('ix_users_uuid', 'users', ['uuid'], unique=True)
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'event_series',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('creator_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('series_type', sa.String(length=20), nullable=False),
        sa.Column('is_indefinite', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('starting_event', sa.JSON(), nullable=False),
        sa.Column('ending_event', sa.JSON(), nullable=True),
        sa.Column('recurrence_frequency', sa.String(length=20), nullable=True),
        sa.Column('recurrence_end_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['creator_id'], ['users.id'],
            name='fk_event_series_creator_id', ondelete='CASCADE'
        ),
    )
    op.create_index('ix_event_series_uuid', 'event_series', ['uuid'], unique=True)
    op.create_index('ix_event_series_creator_id', 'event_series', ['creator_id'])

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('series_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('start_date_time', sa.DateTime(), nullable=False),
        sa.Column('end_date_time', sa.DateTime(), nullable=False),
        sa.Column('cover_photo', sa.String(length=1024), nullable=True),
        sa.Column('location_address', sa.String(length=255), nullable=True),
        sa.Column('location_city', sa.String(length=100), nullable=True),
        sa.Column('location_country', sa.String(length=100), nullable=True),
        sa.Column('is_recurring', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('recurrence_frequency', sa.String(length=20), nullable=True),
        sa.Column('recurrence_interval', sa.Integer(), nullable=True),
        sa.Column('recurrence_end_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['owner_id'], ['users.id'],
            name='fk_events_owner_id', ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['series_id'], ['event_series.id'],
            name='fk_events_series_id', ondelete='SET NULL'
        ),
    )
    op.create_index('ix_events_uuid', 'events', ['uuid'], unique=True)
    op.create_index('ix_events_owner_id', 'events', ['owner_id'])
    op.create_index('ix_events_series_id', 'events', ['series_id'])
    op.create_index('ix_events_type_start', 'events', ['type', 'start_date_time'])

    for table in ('event_participants', 'event_invitations'):
        op.create_table(
            table,
            sa.Column('event_id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.PrimaryKeyConstraint('event_id', 'user_id'),
            sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        )

    op.create_table(
        'contact_lists',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('creator_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['creator_id'], ['users.id'],
            name='fk_contact_lists_creator_id', ondelete='CASCADE'
        ),
    )
    op.create_index('ix_contact_lists_uuid', 'contact_lists', ['uuid'], unique=True)
    op.create_index('ix_contact_lists_creator_id', 'contact_lists', ['creator_id'])

    op.create_table(
        'contact_list_members',
        sa.Column('contact_list_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('contact_list_id', 'user_id'),
        sa.ForeignKeyConstraint(
            ['contact_list_id'], ['contact_lists.id'], ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )

    op.create_table(
        'delete_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('requested_at', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('reason', sa.String(length=500), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_delete_requests_user_id', ondelete='SET NULL'
        ),
        sa.UniqueConstraint('user_id'),
    )
    op.create_index('ix_delete_requests_uuid', 'delete_requests', ['uuid'], unique=True)
    op.create_index('ix_delete_requests_status', 'delete_requests', ['status'])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_index('ix_delete_requests_status', table_name='delete_requests')
    op.drop_index('ix_delete_requests_uuid', table_name='delete_requests')
    op.drop_table('delete_requests')

    op.drop_table('contact_list_members')
    op.drop_index('ix_contact_lists_creator_id', table_name='contact_lists')
    op.drop_index('ix_contact_lists_uuid', table_name='contact_lists')
    op.drop_table('contact_lists')

    op.drop_table('event_invitations')
    op.drop_table('event_participants')
    op.drop_index('ix_events_type_start', table_name='events')
    op.drop_index('ix_events_series_id', table_name='events')
    op.drop_index('ix_events_owner_id', table_name='events')
    op.drop_index('ix_events_uuid', table_name='events')
    op.drop_table('events')

    op.drop_index('ix_event_series_creator_id', table_name='event_series')
    op.drop_index('ix_event_series_uuid', table_name='event_series')
    op.drop_table('event_series')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_index('ix_users_uuid', table_name='users')
    op.drop_table('users')
