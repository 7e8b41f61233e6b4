"""create users/participants/studies/sessions

Revision ID: 4b1e0c7d2a91
Revises:
Create Date: 2026-10-19 10:12:03.114208

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# define the enum type once so we can drop it explicitly
user_role = sa.Enum('viewer', 'admin', name='user_role')


# revision identifiers, used by Alembic.
revision: str = '4b1e0c7d2a91'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1) users
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('role', user_role, nullable=False, server_default='viewer'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # 2) participants
    op.create_table(
        'participants',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('external_id', sa.String(length=40), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=40), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_participants_external_id', 'participants', ['external_id'])

    # 3) studies
    op.create_table(
        'studies',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=40), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_studies_slug', 'studies', ['slug'])

    # 4) sessions; study_id/participant_id are deliberately not foreign keys
    op.create_table(
        'sessions',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('sid', sa.String(length=16), nullable=False),
        sa.Column('study_id', sa.String(length=32), nullable=True),
        sa.Column('participant_id', sa.String(length=32), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(length=40), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('results', sa.JSON(), nullable=True),
        sa.Column('created_by', sa.String(length=255), nullable=False),
        sa.Column('history', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_sessions_sid', 'sessions', ['sid'])
    op.create_index('ix_sessions_study_id', 'sessions', ['study_id'])
    op.create_index('ix_sessions_participant_id', 'sessions', ['participant_id'])


def downgrade() -> None:
    op.drop_table('sessions')
    op.drop_table('studies')
    op.drop_table('participants')
    op.drop_table('users')

    # finally drop enum type
    user_role.drop(op.get_bind(), checkfirst=True)
