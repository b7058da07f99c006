"""
Competition storage for the SAR dog competition system.

All competitions are stored as one list under the ``competitions`` key. Every
mutation reads the full list, changes one competition and writes the list
back with the version it read, so a concurrent writer is detected instead of
silently overwritten.
"""

import uuid
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar
from models.competition import Competition, REGISTRATION_OPEN, REGISTRATION_CLOSED
from models.errors import CompetitionNotFound

logger = logging.getLogger(__name__)

COMPETITIONS_KEY = 'competitions'

LEGACY_STATUSES = {
    'open': REGISTRATION_OPEN,
    'closed': REGISTRATION_CLOSED
}

T = TypeVar('T')


def legacy_participant_id(raw: Dict[str, Any], index: int, participant: Dict[str, Any]) -> str:
    """Stable id for a stored participant that has none, the same on every read."""
    class_name = participant.get('class') or participant.get('category')
    seed = f"{raw.get('id')}/{index}/{participant.get('userId')}/{participant.get('dogId')}/{class_name}"
    return str(uuid.uuid5(uuid.NAMESPACE_URL, seed))


def migrate_competition_dict(raw: Dict[str, Any]) -> bool:
    """
    Bring one stored competition to the current schema in place.

    Returns True if anything was changed.
    """
    changed = False

    if raw.get('status') in LEGACY_STATUSES:
        raw['status'] = LEGACY_STATUSES[raw['status']]
        changed = True

    if not raw.get('startDate') and raw.get('date'):
        raw['startDate'] = raw['date']
        changed = True

    if raw.get('participants') is None:
        raw['participants'] = []
        changed = True

    for index, participant in enumerate(raw['participants']):
        if not participant.get('id'):
            participant['id'] = legacy_participant_id(raw, index, participant)
            changed = True

        # Older clients stored the class under 'category'
        if 'category' in participant:
            if not participant.get('class'):
                participant['class'] = participant.get('category')
            del participant['category']
            changed = True

    return changed


class CompetitionRepository:
    """Reads and writes competitions through the key-value store."""

    def __init__(self, database_manager):
        self.db_manager = database_manager

    def _read(self) -> Tuple[List[Dict[str, Any]], int, int]:
        raw_list, version = self.db_manager.get_versioned(COMPETITIONS_KEY, [])
        if not isinstance(raw_list, list):
            logger.warning(f"Ignoring malformed '{COMPETITIONS_KEY}' value of type {type(raw_list).__name__}")
            raw_list = []

        migrated = 0
        for raw in raw_list:
            if migrate_competition_dict(raw):
                migrated += 1
        return raw_list, version, migrated

    def load(self) -> Tuple[List[Competition], int]:
        """
        Load every competition together with the store version it was read at.

        Legacy records are brought to the current schema in memory only; the
        next write of the list stores them migrated.
        """
        raw_list, version, migrated = self._read()
        if migrated:
            logger.debug(f"{migrated} competitions read in a legacy schema")
        return [Competition.from_dict(raw) for raw in raw_list], version

    def migrate(self) -> int:
        """Write legacy competitions back in the current schema. Returns how many changed."""
        raw_list, version, migrated = self._read()
        if migrated:
            self.db_manager.set(COMPETITIONS_KEY, raw_list, expected_version=version)
            logger.info(f"Migrated {migrated} competitions to the current schema")
        return migrated

    def list_competitions(self) -> List[Competition]:
        competitions, _ = self.load()
        return competitions

    def get(self, competition_id: str) -> Competition:
        """Return one competition or raise CompetitionNotFound."""
        competitions, _ = self.load()
        return self._find(competitions, competition_id)

    def save(self, competitions: List[Competition], expected_version: Optional[int]) -> int:
        return self.db_manager.set(
            COMPETITIONS_KEY,
            [competition.to_dict() for competition in competitions],
            expected_version=expected_version
        )

    def mutate(self, competition_id: str, mutation: Callable[[Competition], T]) -> T:
        """
        Apply mutation to one competition and persist the whole list.

        The mutation may raise to abort; nothing is written then.
        """
        competitions, version = self.load()
        competition = self._find(competitions, competition_id)
        result = mutation(competition)
        self.save(competitions, version)
        return result

    def create(self, competition: Competition) -> Competition:
        competitions, version = self.load()
        if not competition.id:
            competition.id = str(uuid.uuid4())
        competitions.append(competition)
        self.save(competitions, version)
        logger.info(f"Created competition {competition.id} '{competition.name}'")
        return competition

    def delete(self, competition_id: str, check: Callable[[Competition], None] = None) -> Competition:
        """Remove a competition and, with it, all of its participants."""
        competitions, version = self.load()
        competition = self._find(competitions, competition_id)
        if check is not None:
            check(competition)
        remaining = [c for c in competitions if c.id != competition_id]
        self.save(remaining, version)
        logger.info(f"Deleted competition {competition_id} with {len(competition.participants)} participants")
        return competition

    @staticmethod
    def _find(competitions: List[Competition], competition_id: str) -> Competition:
        for competition in competitions:
            if competition.id == competition_id:
                return competition
        raise CompetitionNotFound()
