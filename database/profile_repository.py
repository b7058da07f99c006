"""
Profile and dog lookups for the SAR dog competition system.

Profiles live under ``profile:<userId>`` and each user's dogs under
``dogs:<userId>``. Their CRUD belongs to other services; the engines only
read them, the setters exist for seeding and account services.
"""

import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

ADMIN_ROLE = 'admin'
ORGANIZER_ROLE = 'organizer'
USER_ROLE = 'user'


class ProfileRepository:
    """Reads profiles and dogs from the key-value store."""

    def __init__(self, database_manager):
        self.db_manager = database_manager

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        """Return the stored profile, or a minimal user profile."""
        profile = self.db_manager.get(f"profile:{user_id}")
        if not isinstance(profile, dict):
            return {'id': user_id, 'role': USER_ROLE}
        return profile

    def get_role(self, user_id: str) -> str:
        return self.get_profile(user_id).get('role') or USER_ROLE

    def save_profile(self, user_id: str, profile: Dict[str, Any]) -> Dict[str, Any]:
        stored = dict(profile, id=user_id)
        stored.setdefault('role', USER_ROLE)
        self.db_manager.set(f"profile:{user_id}", stored)
        logger.info(f"Saved profile {user_id}")
        return stored

    def get_dogs(self, user_id: str) -> List[Dict[str, Any]]:
        dogs = self.db_manager.get(f"dogs:{user_id}", [])
        return dogs if isinstance(dogs, list) else []

    def find_dog(self, user_id: str, dog_id: str) -> Optional[Dict[str, Any]]:
        for dog in self.get_dogs(user_id):
            if dog.get('id') == dog_id:
                return dog
        return None

    def save_dogs(self, user_id: str, dogs: List[Dict[str, Any]]) -> None:
        self.db_manager.set(f"dogs:{user_id}", [dict(dog, userId=user_id) for dog in dogs])
        logger.info(f"Saved {len(dogs)} dogs for user {user_id}")
