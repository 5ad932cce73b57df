"""Application layer: interfaces, DTOs, services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (identity repository, chat adapter).
"""

from app.application.interfaces import IChatPlatformAdapter, IUserIdentityRepository
from app.application.services import CommunicationService, CredentialHasher

__all__ = [
    "CommunicationService",
    "CredentialHasher",
    "IChatPlatformAdapter",
    "IUserIdentityRepository",
]
