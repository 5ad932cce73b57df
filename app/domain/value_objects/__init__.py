"""Domain value objects and shared value types."""

from app.domain.value_objects.core import ChatCredentials, TenantCode

__all__ = [
    "ChatCredentials",
    "TenantCode",
]
