"""Add flagged emails, calendar events, blocklist and daily queue

Revision ID: 002
Revises: 001
Create Date: 2025-10-20

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create flagged_emails table
    op.create_table(
        'flagged_emails',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('gmail_message_id', sa.String(length=255), nullable=False),
        sa.Column('from_email', sa.String(length=255), nullable=False),
        sa.Column('subject', sa.String(length=1000), nullable=True),
        sa.Column('snippet', sa.Text(), nullable=True),
        sa.Column('contact_id', sa.Integer(), nullable=True),
        sa.Column('reason', sa.String(length=500), nullable=True),
        sa.Column('priority', sa.String(length=20), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('action_required', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('received_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['contact_id'], ['contacts.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_flagged_emails_gmail_message_id', 'flagged_emails', ['gmail_message_id'], unique=True)
    op.create_index('ix_flagged_emails_contact_id', 'flagged_emails', ['contact_id'])
    op.create_index('ix_flagged_emails_received', 'flagged_emails', ['received_at'])

    # Create calendar_events table
    op.create_table(
        'calendar_events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('google_event_id', sa.String(length=255), nullable=False),
        sa.Column('summary', sa.String(length=500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=500), nullable=True),
        sa.Column('meeting_url', sa.String(length=1000), nullable=True),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('is_all_day', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('related_contact_ids', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_calendar_events_google_event_id', 'calendar_events', ['google_event_id'], unique=True)
    op.create_index('ix_calendar_events_start_time', 'calendar_events', ['start_time'])

    # Create blocklist table
    op.create_table(
        'blocklist',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index('ix_blocklist_created_at', 'blocklist', ['created_at'])

    # Create daily_queue table
    op.create_table(
        'daily_queue',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('queue_date', sa.Date(), nullable=False),
        sa.Column('contact_id', sa.Integer(), nullable=False),
        sa.Column('state', sa.Enum('pending', 'contacted', 'skipped', name='queuestate'), nullable=False, server_default='pending'),
        sa.Column('added_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['contact_id'], ['contacts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('queue_date', 'contact_id', name='uq_daily_queue_date_contact')
    )
    op.create_index('ix_daily_queue_queue_date', 'daily_queue', ['queue_date'])


def downgrade() -> None:
    op.drop_index('ix_daily_queue_queue_date', table_name='daily_queue')
    op.drop_table('daily_queue')
    op.drop_index('ix_blocklist_created_at', table_name='blocklist')
    op.drop_table('blocklist')
    op.drop_index('ix_calendar_events_start_time', table_name='calendar_events')
    op.drop_index('ix_calendar_events_google_event_id', table_name='calendar_events')
    op.drop_table('calendar_events')
    op.drop_index('ix_flagged_emails_received', table_name='flagged_emails')
    op.drop_index('ix_flagged_emails_contact_id', table_name='flagged_emails')
    op.drop_index('ix_flagged_emails_gmail_message_id', table_name='flagged_emails')
    op.drop_table('flagged_emails')

    op.execute('DROP TYPE IF EXISTS queuestate')
