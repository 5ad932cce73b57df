"""change_user_info_to_jsonb

Revision ID: 8a4e6b2c1d37
Revises: 3f1c2a7d9b10
Create Date: 2025-04-08 06:19:29.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "8a4e6b2c1d37"
down_revision: Union[str, Sequence[str], None] = "3f1c2a7d9b10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.alter_column(
        "users",
        "user_info",
        type_=JSONB(),
        postgresql_using="user_info::jsonb",
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.alter_column(
        "users",
        "user_info",
        type_=sa.JSON(),
        postgresql_using="user_info::json",
    )
