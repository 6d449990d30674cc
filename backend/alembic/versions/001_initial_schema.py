"""initial schema: users, sessions, forms, workspaces

Revision ID: 001
Revises:
Create Date: 2026-10-16 00:00:00.000000

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
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('last_login', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'sessions',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('token', sa.String(255), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('last_activity', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_sessions_user_id', 'sessions', ['user_id'])
    op.create_index('ix_sessions_token', 'sessions', ['token'], unique=True)
    op.create_index('ix_sessions_expires_at', 'sessions', ['expires_at'])

    op.create_table(
        'forms',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('admin_id', sa.Uuid(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='private'),
        sa.Column('form_fields', sa.JSON(), nullable=False),
        sa.Column('form_logics', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['admin_id'], ['users.id'], ondelete='CASCADE'),
        sa.CheckConstraint("status IN ('private', 'public', 'archived')", name='forms_status_check'),
    )
    op.create_index('ix_forms_admin_id', 'forms', ['admin_id'])
    op.create_index('ix_forms_status', 'forms', ['status'])

    op.create_table(
        'form_submissions',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('form_id', sa.Uuid(), nullable=False),
        sa.Column('responses', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['form_id'], ['forms.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_form_submissions_form_id', 'form_submissions', ['form_id'])

    op.create_table(
        'workspaces',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('admin_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['admin_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('admin_id', 'title', name='uq_workspaces_admin_title'),
    )
    op.create_index('ix_workspaces_admin_id', 'workspaces', ['admin_id'])

    # A form sits in at most one workspace
    op.create_table(
        'workspace_forms',
        sa.Column('workspace_id', sa.Uuid(), primary_key=True),
        sa.Column('form_id', sa.Uuid(), primary_key=True, unique=True),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['form_id'], ['forms.id'], ondelete='CASCADE'),
    )


def downgrade() -> None:
    op.drop_table('workspace_forms')
    op.drop_index('ix_workspaces_admin_id', table_name='workspaces')
    op.drop_table('workspaces')
    op.drop_index('ix_form_submissions_form_id', table_name='form_submissions')
    op.drop_table('form_submissions')
    op.drop_index('ix_forms_status', table_name='forms')
    op.drop_index('ix_forms_admin_id', table_name='forms')
    op.drop_table('forms')
    op.drop_index('ix_sessions_expires_at', table_name='sessions')
    op.drop_index('ix_sessions_token', table_name='sessions')
    op.drop_index('ix_sessions_user_id', table_name='sessions')
    op.drop_table('sessions')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
