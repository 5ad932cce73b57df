"""users_composite_key_and_external_id_index

Makes (user_id, tenant_code) the primary key so a user id may exist once per
tenant, and adds an expression index for lookups by
user_info->>'external_user_id' within a tenant. Run
scripts.backfill_tenant_codes first.

Revision ID: e7b3f5a8c920
Revises: c52d9e0f4a61
Create Date: 2025-09-10 10:12:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "e7b3f5a8c920"
down_revision: Union[str, Sequence[str], None] = "c52d9e0f4a61"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    conn = op.get_bind()
    missing = conn.execute(
        sa.text("SELECT count(*) FROM users WHERE tenant_code IS NULL")
    ).scalar_one()
    if missing:
        raise RuntimeError(
            f"{missing} users rows have no tenant_code; "
            "run python -m scripts.backfill_tenant_codes before upgrading."
        )
    op.alter_column("users", "tenant_code", nullable=False)
    op.drop_constraint("users_pkey", "users", type_="primary")
    op.create_primary_key("users_pkey", "users", ["user_id", "tenant_code"])
    op.create_index(
        "ix_users_tenant_external_user_id",
        "users",
        ["tenant_code", sa.text("(user_info ->> 'external_user_id')")],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_users_tenant_external_user_id", table_name="users")
    op.drop_constraint("users_pkey", "users", type_="primary")
    op.create_primary_key("users_pkey", "users", ["user_id"])
    op.alter_column("users", "tenant_code", nullable=True)
