"""
Registration of dogs into competition classes.
"""

import uuid
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from models.actor import Actor
from models.competition import Competition, Participant, REGISTERED, REGISTRATION_OPEN
from models.errors import (CompetitionFull, DogNotFound, DuplicateRegistration,
                           InvalidCategory, RegistrationClosed)
from database.competition_repository import CompetitionRepository
from database.profile_repository import ProfileRepository
from utils.text_utils import TextUtils

logger = logging.getLogger(__name__)


def resolve_class(competition: Competition, class_name: str) -> str:
    """Return the declared class label matching class_name, or raise InvalidCategory."""
    if TextUtils.is_blank(class_name):
        raise InvalidCategory("Class is required")
    class_name = class_name.strip()
    if not competition.categories:
        return class_name

    declared = TextUtils.find_label(class_name, competition.categories)
    if declared is None:
        declared = TextUtils.find_label(TextUtils.normalize_category(class_name), competition.categories)
    if declared is None:
        raise InvalidCategory(f"Class '{class_name}' is not offered by this competition")
    return declared


class RegistrationManager:
    """Validates applications and appends them to a competition."""

    def __init__(self, database_manager):
        self.db_manager = database_manager
        self.competitions = CompetitionRepository(database_manager)
        self.profiles = ProfileRepository(database_manager)
        self.fallback_names = database_manager.config.get('fallback_names', {})

    def register(self, competition_id: str, actor: Actor, dog_id: str, class_name: str,
                 handler_name: Optional[str] = None, documents: Optional[List[Any]] = None) -> Participant:
        """
        Register the actor's dog in one class of a competition.

        A dog can hold one active application per class; a rejected
        application does not block a new one.
        """
        def append(competition: Competition) -> Participant:
            if competition.status != REGISTRATION_OPEN:
                raise RegistrationClosed()

            declared = resolve_class(competition, class_name)
            if TextUtils.is_blank(dog_id) or self.profiles.find_dog(actor.user_id, dog_id) is None:
                raise DogNotFound()

            for existing in competition.active_participants():
                if existing.matches(actor.user_id, dog_id, declared):
                    raise DuplicateRegistration()

            if competition.max_participants and len(competition.active_participants()) >= competition.max_participants:
                raise CompetitionFull()

            participant = Participant(
                id=str(uuid.uuid4()),
                user_id=actor.user_id,
                dog_id=dog_id,
                class_name=declared,
                status=REGISTERED,
                handler_name=None if TextUtils.is_blank(handler_name) else handler_name.strip(),
                documents=list(documents or []),
                date=datetime.now(timezone.utc).isoformat()
            )
            competition.participants.append(participant)
            return participant

        participant = self.competitions.mutate(competition_id, append)
        logger.info(f"Registered dog {dog_id} of user {actor.user_id} in '{participant.class_name}' "
                    f"of competition {competition_id}")
        return participant

    def list_registrations(self, actor: Actor) -> List[Dict[str, Any]]:
        """Every application of the actor across all competitions."""
        dogs = {dog.get('id'): dog for dog in self.profiles.get_dogs(actor.user_id)}
        unknown = self.fallback_names.get('unknown', 'Unknown')

        registrations = []
        for competition in self.competitions.list_competitions():
            for participant in competition.participants:
                if participant.user_id != actor.user_id:
                    continue
                dog = dogs.get(participant.dog_id) or {}
                results = participant.results
                registrations.append({
                    'competitionId': competition.id,
                    'competitionName': competition.name,
                    'startDate': competition.start_date,
                    'endDate': competition.end_date,
                    'location': competition.location,
                    'participantId': participant.id,
                    'dogName': dog.get('name') or unknown,
                    'category': participant.class_name,
                    'class': participant.class_name,
                    'status': participant.status,
                    'documents': list(participant.documents),
                    'notes': results.notes if results else None
                })
        return registrations
