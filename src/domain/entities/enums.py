"""
Domain Enums

Enumeration types used across domain entities.
"""

from enum import Enum


class IdentityProvider(str, Enum):
    """Where an identity's credentials live"""

    email = "email"
    google = "google"
