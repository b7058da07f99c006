"""
Competition management for the SAR dog competition system.
"""

import dataclasses
import logging
from typing import Any, Dict, List
from models.actor import Actor
from models.competition import Competition, COMPETITION_STATUSES, PLANNED
from models.errors import Forbidden, ValidationError
from database.competition_repository import CompetitionRepository
from utils.text_utils import TextUtils

logger = logging.getLogger(__name__)

# Fields a client may never set through create or update
PROTECTED_FIELDS = ('id', 'organizerId', 'participants')


class CompetitionManager:
    """Manages competition create, update and delete for organizers."""

    def __init__(self, database_manager):
        self.db_manager = database_manager
        self.repository = CompetitionRepository(database_manager)

    def list_competitions(self) -> List[Competition]:
        return self.repository.list_competitions()

    def get_competition(self, competition_id: str) -> Competition:
        return self.repository.get(competition_id)

    def create_competition(self, actor: Actor, data: Dict[str, Any]) -> Competition:
        """Create a competition owned by the actor; organizers and admins only."""
        if not actor.can_organize:
            raise Forbidden()
        if TextUtils.is_blank(data.get('name')):
            raise ValidationError("Competition name is required")

        fields = self._clean(data)
        fields.setdefault('status', PLANNED)
        fields['organizerId'] = actor.user_id
        fields['participants'] = []

        competition = self.repository.create(Competition.from_dict(fields))
        logger.info(f"User {actor.user_id} created competition {competition.id}")
        return competition

    def update_competition(self, actor: Actor, competition_id: str, data: Dict[str, Any]) -> Competition:
        """Merge changes into a competition, leaving its participants untouched."""
        fields = self._clean(data)

        def update(competition: Competition) -> Competition:
            actor.require_manager(competition)
            merged = competition.to_dict()
            merged.update(fields)
            updated = Competition.from_dict(merged)
            for field in dataclasses.fields(Competition):
                if field.name != 'participants':
                    setattr(competition, field.name, getattr(updated, field.name))
            return competition

        competition = self.repository.mutate(competition_id, update)
        logger.info(f"User {actor.user_id} updated competition {competition_id}")
        return competition

    def delete_competition(self, actor: Actor, competition_id: str) -> None:
        """Delete a competition together with its participants."""
        self.repository.delete(competition_id, check=actor.require_manager)
        logger.info(f"User {actor.user_id} deleted competition {competition_id}")

    @staticmethod
    def _clean(data: Dict[str, Any]) -> Dict[str, Any]:
        fields = {k: v for k, v in data.items() if k not in PROTECTED_FIELDS and v is not None}

        if 'status' in fields and fields['status'] not in COMPETITION_STATUSES:
            raise ValidationError(f"Unknown competition status '{fields['status']}'")
        if 'categories' in fields:
            fields['categories'] = TextUtils.normalize_categories(fields['categories'])
        if 'date' in fields and 'startDate' not in fields:
            fields['startDate'] = fields['date']
        if 'maxParticipants' in fields:
            try:
                fields['maxParticipants'] = int(fields['maxParticipants'] or 0)
            except (TypeError, ValueError):
                raise ValidationError("maxParticipants must be a whole number")
            if fields['maxParticipants'] < 0:
                raise ValidationError("maxParticipants must not be negative")
        return fields
