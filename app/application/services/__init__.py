"""Application services: credential derivation and communication orchestration."""

from app.application.services.communication_service import CommunicationService
from app.application.services.credential_hasher import (
    CredentialHasher,
    HashAlgorithm,
    Shake256Algorithm,
)

__all__ = [
    "CommunicationService",
    "CredentialHasher",
    "HashAlgorithm",
    "Shake256Algorithm",
]
