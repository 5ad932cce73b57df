"""add_tenant_code_to_users

Adds a nullable tenant_code column. Existing rows stay NULL until
scripts.backfill_tenant_codes has run; the next revision makes the column
part of the primary key and refuses to run while NULLs remain.

Revision ID: c52d9e0f4a61
Revises: 8a4e6b2c1d37
Create Date: 2025-08-25 08:45:03.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "c52d9e0f4a61"
down_revision: Union[str, Sequence[str], None] = "8a4e6b2c1d37"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.add_column("users", sa.Column("tenant_code", sa.String(), nullable=True))
    op.create_index("idx_users_tenant_code", "users", ["tenant_code"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_users_tenant_code", table_name="users")
    op.drop_column("users", "tenant_code")
