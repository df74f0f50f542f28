"""Create users, events, event_registrations and attendees tables

Revision ID: e001_create_core_tables
Revises:
Create Date: 2026-10-18

This migration creates the core schema:
- users: accounts with role and password reset state
- events: admin-owned events with capacity and lifecycle status
- event_registrations: one row per (user, event) self-registration
- attendees: admin-managed roster entries
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'e001_create_core_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', sa.Enum('user', 'admin', name='user_role_enum'), nullable=False),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('bio', sa.String(), nullable=True),
        sa.Column('reset_password_token', sa.String(), nullable=True),
        sa.Column('reset_password_expires', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_reset_password_token', 'users', ['reset_password_token'])

    op.create_table(
        'events',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('draft', 'published', 'ongoing', 'completed', 'cancelled', name='event_status_enum'),
            nullable=False,
        ),
        sa.Column('current_attendees', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),

        # Constraints
        sa.CheckConstraint('capacity >= 0', name='check_event_capacity_positive'),
        sa.CheckConstraint('price >= 0', name='check_event_price_positive'),
        sa.CheckConstraint('current_attendees >= 0', name='check_event_attendees_positive'),
        sa.CheckConstraint('current_attendees <= capacity', name='check_event_attendees_lte_capacity'),
    )
    op.create_index('ix_events_user_id', 'events', ['user_id'])
    op.create_index('ix_events_category', 'events', ['category'])
    op.create_index('ix_events_date', 'events', ['date'])
    op.create_index('ix_events_status', 'events', ['status'])

    op.create_table(
        'event_registrations',
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('event_id', sa.String(), sa.ForeignKey('events.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('registered_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_event_registrations_event_id', 'event_registrations', ['event_id'])

    op.create_table(
        'attendees',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('event_id', sa.String(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('company', sa.String(), nullable=True),
        sa.Column('job_title', sa.String(), nullable=True),
        sa.Column(
            'ticket_type',
            sa.Enum('VIP', 'Regular', 'Student', 'Staff', name='ticket_type_enum'),
            nullable=False,
        ),
        sa.Column(
            'status',
            sa.Enum('confirmed', 'pending', 'cancelled', 'checked-in', name='attendee_status_enum'),
            nullable=False,
        ),
        sa.Column('registration_date', sa.DateTime(), nullable=False),
        sa.Column('dietary', sa.String(), nullable=True),
        sa.Column('notes', sa.String(), nullable=True),

        sa.UniqueConstraint('event_id', 'email', name='uq_attendee_event_email'),
    )
    op.create_index('ix_attendees_event_id', 'attendees', ['event_id'])
    op.create_index('ix_attendees_user_id', 'attendees', ['user_id'])
    op.create_index('ix_attendees_email', 'attendees', ['email'])
    op.create_index('ix_attendees_registration_date', 'attendees', ['registration_date'])


def downgrade() -> None:
    op.drop_table('attendees')
    op.drop_table('event_registrations')
    op.drop_table('events')
    op.drop_table('users')

    # Drop enum types (PostgreSQL)
    bind = op.get_bind()
    for enum_name in ('attendee_status_enum', 'ticket_type_enum', 'event_status_enum', 'user_role_enum'):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
