"""Initial schema

Revision ID: 001
Revises:
Create Date: 2025-10-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create contacts table
    op.create_table(
        'contacts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('company', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('website', sa.String(length=500), nullable=True),
        sa.Column('status', sa.Enum('new', 'contacted', 'responded', 'interested', 'accepted', 'declined', name='contactstatus'), nullable=False, server_default='new'),
        sa.Column('priority', sa.Enum('low', 'medium', 'high', name='contactpriority'), nullable=False, server_default='medium'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('first_contact_date', sa.DateTime(), nullable=True),
        sa.Column('last_contact_date', sa.DateTime(), nullable=True),
        sa.Column('next_followup_date', sa.DateTime(), nullable=True),
        sa.Column('sheets_row_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_contacts_email', 'contacts', ['email'], unique=True)
    op.create_index('ix_contacts_status', 'contacts', ['status'])
    op.create_index('ix_contacts_followup_status', 'contacts', ['next_followup_date', 'status'])

    # Create automation_logs table
    op.create_table(
        'automation_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('job_name', sa.String(length=100), nullable=False),
        sa.Column('status', sa.Enum('running', 'success', 'failed', name='jobstatus'), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('execution_time_ms', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_automation_logs_job_name', 'automation_logs', ['job_name'])
    op.create_index('ix_automation_logs_created_at', 'automation_logs', ['created_at'])

    # Create settings table
    op.create_table(
        'settings',
        sa.Column('key', sa.String(length=100), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('key')
    )


def downgrade() -> None:
    op.drop_table('settings')
    op.drop_index('ix_automation_logs_created_at', table_name='automation_logs')
    op.drop_index('ix_automation_logs_job_name', table_name='automation_logs')
    op.drop_table('automation_logs')
    op.drop_index('ix_contacts_followup_status', table_name='contacts')
    op.drop_index('ix_contacts_status', table_name='contacts')
    op.drop_index('ix_contacts_email', table_name='contacts')
    op.drop_table('contacts')

    op.execute('DROP TYPE IF EXISTS jobstatus')
    op.execute('DROP TYPE IF EXISTS contactpriority')
    op.execute('DROP TYPE IF EXISTS contactstatus')
