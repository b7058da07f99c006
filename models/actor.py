"""
Identity of the caller of an engine operation.
"""

from dataclasses import dataclass

from .errors import Forbidden


@dataclass(frozen=True)
class Actor:
    """Authenticated user and the role read from their profile."""
    user_id: str
    role: str = 'user'

    @property
    def is_admin(self) -> bool:
        return self.role == 'admin'

    @property
    def can_organize(self) -> bool:
        return self.role in ('organizer', 'admin')

    def can_manage(self, competition) -> bool:
        return self.is_admin or competition.organizer_id == self.user_id

    def require_manager(self, competition) -> None:
        """Raise Forbidden unless the actor owns the competition or is an admin."""
        if not self.can_manage(competition):
            raise Forbidden()
