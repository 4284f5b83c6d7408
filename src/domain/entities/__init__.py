"""
Domain Entities

Each entity in its own file.
"""

from .enums import IdentityProvider
from .identity import Identity, normalize_email
from .refresh_token import RefreshTokenRecord

__all__ = [
    # Enums
    "IdentityProvider",
    # Entities
    "Identity",
    "RefreshTokenRecord",
    # Helpers
    "normalize_email",
]
