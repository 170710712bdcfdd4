"""
Accounts module.

Anonymous-to-user migration and user practice profiles.

Public API:
- AccountService: Migration and profile operations
- Profile, ProfileUpdate: Profile models
"""

from .models import MigrateAnonRequest, MigrateAnonResponse, Profile, ProfileUpdate
from .repository import InMemoryProfileRepository, ProfileRepository
from .service import AccountService

__all__ = [
    # Models
    "MigrateAnonRequest",
    "MigrateAnonResponse",
    "Profile",
    "ProfileUpdate",
    # Storage
    "InMemoryProfileRepository",
    "ProfileRepository",
    # Service
    "AccountService",
]
