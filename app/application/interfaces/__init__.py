"""Application interfaces (ports): repository and adapter protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.chat import IChatPlatformAdapter
from app.application.interfaces.repositories import IUserIdentityRepository

__all__ = [
    "IChatPlatformAdapter",
    "IUserIdentityRepository",
]
