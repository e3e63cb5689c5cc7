"""add user photo

Revision ID: 8e1f3c6a2b90
Revises: 5c2e9a41d7b3
Create Date: 2026-10-21 09:41:05.307115

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8e1f3c6a2b90'
down_revision: Union[str, Sequence[str], None] = '5c2e9a41d7b3'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.add_column('users', sa.Column('photo', sa.String(), nullable=True))


def downgrade() -> None:
    """Downgrade schema."""
    with op.batch_alter_table('users') as batch_op:
        batch_op.drop_column('photo')
