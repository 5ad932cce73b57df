"""User identity ORM model: internal user id to chat platform id, per tenant."""

from typing import Any

from sqlalchemy import Boolean, Index, String, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import AuditedModel


class UserIdentity(AuditedModel, Base):
    """Identity mapping. Table: users. Primary key (user_id, tenant_code).

    user_info holds external_user_id (chat platform id) and other metadata.
    Expression index on (tenant_code, user_info->>'external_user_id') backs
    reverse lookups.
    """

    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(String, primary_key=True)
    tenant_code: Mapped[str] = mapped_column(String, primary_key=True)
    user_info: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)
    is_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    __table_args__ = (
        Index("idx_users_tenant_code", "tenant_code"),
        Index(
            "ix_users_tenant_external_user_id",
            "tenant_code",
            text("(user_info ->> 'external_user_id')"),
        ),
    )
