"""create participants and messages

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-19 09:12:41.208311

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'participants',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('last_status', sa.BigInteger(), nullable=False),
        # Name uniqueness is what serializes concurrent joins
        sa.UniqueConstraint('name', name='uq_participants_name'),
    )
    op.create_index('ix_participants_last_status', 'participants', ['last_status'])

    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('from', sa.String(255), nullable=False),
        sa.Column('to', sa.String(255), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('time', sa.String(8), nullable=False),
        sa.CheckConstraint(
            "type IN ('message', 'private_message', 'status')",
            name='ck_messages_type',
        ),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_messages_from', 'messages', ['from'])
    op.create_index('ix_messages_to', 'messages', ['to'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_messages_to', table_name='messages')
    op.drop_index('ix_messages_from', table_name='messages')
    op.drop_table('messages')
    op.drop_index('ix_participants_last_status', table_name='participants')
    op.drop_table('participants')
