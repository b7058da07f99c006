"""
Placement of confirmed, scored participants within their class.
"""

import logging
from datetime import date
from typing import Callable, Dict, List, Optional
from models.competition import Participant, CONFIRMED

logger = logging.getLogger(__name__)


def parse_birth_date(value: Optional[str]) -> date:
    """Parse a dog's birth date; missing or unreadable dates become date.min."""
    if not value:
        return date.min
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.debug(f"Unreadable birth date '{value}', ranking it as oldest")
        return date.min


class PlacementCalculator:
    """Groups participants by class and assigns 1-based places."""

    def __init__(self, birth_date_of: Callable[[Participant], Optional[str]]):
        self.birth_date_of = birth_date_of

    @staticmethod
    def is_rankable(participant: Participant) -> bool:
        results = participant.results
        return (participant.status == CONFIRMED
                and bool(participant.class_name)
                and results is not None
                and results.total is not None)

    def group(self, participants: List[Participant]) -> Dict[str, List[Participant]]:
        groups: Dict[str, List[Participant]] = {}
        for participant in participants:
            if not self.is_rankable(participant):
                continue
            groups.setdefault(participant.class_name, []).append(participant)
        return groups

    def sort_key(self, participant: Participant):
        # Higher total, then higher search, then the younger dog
        results = participant.results
        birth = parse_birth_date(self.birth_date_of(participant))
        return (-(results.total or 0), -(results.search or 0), -birth.toordinal())

    def compute(self, participants: List[Participant]) -> Dict[str, List[Participant]]:
        """
        Assign places inside every class group and return the sorted groups.

        Each group gets its own sequence starting at 1; re-running with the
        same scores gives the same places. Participants that can no longer
        be ranked lose the place they had.
        """
        for participant in participants:
            if participant.results is not None and not self.is_rankable(participant):
                participant.results.place = None

        groups = self.group(participants)
        for class_name, members in groups.items():
            members.sort(key=self.sort_key)
            for place, participant in enumerate(members, 1):
                participant.results.place = place
            logger.info(f"Placed {len(members)} participants in '{class_name}'")
        return groups
