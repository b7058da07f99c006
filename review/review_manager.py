"""
Organizer review of a competition: status decisions, scores, placements and
the batch save of everything edited in one sitting.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from models.actor import Actor
from models.competition import Competition, Participant, Results, PARTICIPANT_STATUSES, REJECTED
from models.errors import ParticipantNotFound, ValidationError, CompetitionNotFound, DuplicateRegistration
from models.rating import SaveReport
from database.competition_repository import CompetitionRepository
from database.profile_repository import ProfileRepository
from registration.registration_manager import resolve_class
from review.placement import PlacementCalculator
from review.scoring import ScoreCalculator
from utils.text_utils import TextUtils

logger = logging.getLogger(__name__)


@dataclass
class ParticipantRef:
    """Addresses a participant by id, or by (userId, dogId, class) for legacy callers."""
    participant_id: Optional[str] = None
    user_id: Optional[str] = None
    dog_id: Optional[str] = None
    class_name: Optional[str] = None

    def resolve(self, competition: Competition) -> Participant:
        if self.participant_id:
            participant = competition.find_participant(self.participant_id)
            if participant is None:
                raise ParticipantNotFound()
            return participant

        if self.class_name:
            matches = [p for p in competition.participants
                       if p.matches(self.user_id, self.dog_id, self.class_name)]
            # An active application wins over an earlier rejected one
            active = [p for p in matches if p.status != REJECTED]
            if active or matches:
                return (active or matches)[0]

        for participant in competition.participants:
            if participant.matches(self.user_id, self.dog_id):
                return participant
        raise ParticipantNotFound()


def ensure_unique(competition: Competition, participant: Participant, class_name: str, status: str) -> None:
    """
    Refuse a change that would give the dog a second active application in a class.

    Only a class move or a return from rejection can create one.
    """
    if status == REJECTED:
        return
    if class_name == participant.class_name and participant.status != REJECTED:
        return
    for other in competition.active_participants():
        if other is not participant and other.matches(participant.user_id, participant.dog_id, class_name):
            raise DuplicateRegistration()


def apply_status(competition: Competition, participant: Participant, new_status: str,
                 reason: Optional[str] = None, category: Optional[str] = None) -> Participant:
    """Apply a status decision; rejections must carry a reason."""
    if new_status not in PARTICIPANT_STATUSES:
        raise ValidationError(f"Unknown participant status '{new_status}'")
    if new_status == REJECTED and TextUtils.is_blank(reason):
        raise ValidationError("A reason is required to reject an application")

    class_name = participant.class_name
    if not TextUtils.is_blank(category):
        class_name = resolve_class(competition, category)
    ensure_unique(competition, participant, class_name, new_status)

    participant.status = new_status
    participant.class_name = class_name
    if not TextUtils.is_blank(reason):
        participant.ensure_results().notes = reason.strip()
    return participant


class ReviewSession:
    """
    Working copy of one competition's participants.

    Scores and placements change only the copy; ``save`` writes every
    participant's status and results back in one versioned write.
    """

    def __init__(self, manager: 'ReviewManager', competition: Competition, actor: Actor):
        self.manager = manager
        self.competition = competition
        self.actor = actor
        self._birth_dates: Dict[str, Optional[str]] = {}
        self.placements = PlacementCalculator(self.birth_date_of)

    @property
    def participants(self) -> List[Participant]:
        return self.competition.participants

    def participant(self, participant_id: str) -> Participant:
        participant = self.competition.find_participant(participant_id)
        if participant is None:
            raise ParticipantNotFound()
        return participant

    def birth_date_of(self, participant: Participant) -> Optional[str]:
        key = f"{participant.user_id}:{participant.dog_id}"
        if key not in self._birth_dates:
            dog = self.manager.profiles.find_dog(participant.user_id, participant.dog_id) or {}
            self._birth_dates[key] = dog.get('birth')
        return self._birth_dates[key]

    def set_status(self, participant_id: str, new_status: str, reason: Optional[str] = None) -> Participant:
        return apply_status(self.competition, self.participant(participant_id), new_status, reason)

    def set_score(self, participant_id: str, field: str, value: Any) -> Results:
        return self.manager.scores.set_score(self.participant(participant_id), field, value)

    def compute_placements(self) -> Dict[str, List[Participant]]:
        return self.placements.compute(self.participants)

    def save(self) -> SaveReport:
        """
        Persist status and results of every participant in the session.

        Edits are merged by participant id onto the current stored list, so
        registrations that arrived meanwhile are kept. Participants that no
        longer exist are reported as failed.
        """
        repository = self.manager.competitions
        competitions, version = repository.load()
        stored = next((c for c in competitions if c.id == self.competition.id), None)
        if stored is None:
            raise CompetitionNotFound()
        self.actor.require_manager(stored)

        report = SaveReport()
        for participant in self.participants:
            target = stored.find_participant(participant.id)
            if target is None:
                report.failed[participant.id] = ParticipantNotFound.default_message
                continue
            target.status = participant.status
            target.class_name = participant.class_name
            target.results = copy.deepcopy(participant.results)
            report.saved.append(participant.id)

        repository.save(competitions, version)
        logger.info(f"Saved {len(report.saved)} participants of competition {self.competition.id}, "
                    f"{len(report.failed)} failed")
        return report


class ReviewManager:
    """Organizer-facing operations on a competition's participants."""

    def __init__(self, database_manager):
        self.db_manager = database_manager
        self.competitions = CompetitionRepository(database_manager)
        self.profiles = ProfileRepository(database_manager)
        self.scores = ScoreCalculator(database_manager.config)

    def set_status(self, competition_id: str, actor: Actor, ref: ParticipantRef, new_status: str,
                   reason: Optional[str] = None, category: Optional[str] = None) -> Participant:
        """Accept or reject an application and persist it immediately."""
        def decide(competition: Competition) -> Participant:
            actor.require_manager(competition)
            return apply_status(competition, ref.resolve(competition), new_status, reason, category)

        participant = self.competitions.mutate(competition_id, decide)
        logger.info(f"Participant {participant.id} of competition {competition_id} is now {new_status}")
        return participant

    def update_participant(self, competition_id: str, actor: Actor, ref: ParticipantRef,
                           status: Optional[str] = None, results: Optional[Dict[str, Any]] = None,
                           category: Optional[str] = None) -> Participant:
        """
        Replace status and/or results of one participant.

        Incoming results go through the score derivation, so total and
        qualification always match the phase scores that were sent.
        """
        def update(competition: Competition) -> Participant:
            actor.require_manager(competition)
            participant = ref.resolve(competition)
            if status and status not in PARTICIPANT_STATUSES:
                raise ValidationError(f"Unknown participant status '{status}'")
            new_status = status or participant.status
            class_name = participant.class_name
            if not TextUtils.is_blank(category):
                class_name = resolve_class(competition, category)
            ensure_unique(competition, participant, class_name, new_status)
            new_results = self._parse_results(results) if results is not None else None

            participant.status = new_status
            participant.class_name = class_name
            if new_results is not None:
                participant.results = new_results
            return participant

        participant = self.competitions.mutate(competition_id, update)
        logger.info(f"Updated participant {participant.id} of competition {competition_id}")
        return participant

    def _parse_results(self, data: Dict[str, Any]) -> Results:
        try:
            results = Results.from_dict({
                key: value for key, value in data.items() if key not in ('search', 'obedience')
            })
        except (TypeError, ValueError):
            raise ValidationError("Malformed results")
        results.search = self.scores.parse_score(data.get('search'))
        results.obedience = self.scores.parse_score(data.get('obedience'))
        place, notes = results.place, results.notes
        self.scores.derive(results)
        if results.has_scores():
            results.place = place
        results.notes = notes
        return results

    def open_session(self, competition_id: str, actor: Actor) -> ReviewSession:
        competition = self.competitions.get(competition_id)
        actor.require_manager(competition)
        return ReviewSession(self, competition, actor)

    def compute_placements(self, competition_id: str, actor: Actor) -> ReviewSession:
        """Recompute places for a competition and save them."""
        session = self.open_session(competition_id, actor)
        session.compute_placements()
        session.save()
        return session

    def save_participants(self, competition_id: str, actor: Actor,
                          updates: List[Dict[str, Any]]) -> SaveReport:
        """
        Batch save of many participants' status and results.

        Updates that cannot be applied are reported per participant; the
        others are written together.
        """
        session = self.open_session(competition_id, actor)
        report = SaveReport()
        for update in updates:
            ref = ParticipantRef(
                participant_id=update.get('participantId'),
                user_id=update.get('userId'),
                dog_id=update.get('dogId'),
                class_name=update.get('category')
            )
            label = ref.participant_id or f"{ref.user_id}:{ref.dog_id}:{ref.class_name}"
            try:
                participant = ref.resolve(session.competition)
                results = update.get('results')
                new_results = self._parse_results(results) if results is not None else None
                if update.get('status') and update['status'] != participant.status:
                    apply_status(session.competition, participant, update['status'], (results or {}).get('notes'))
                if new_results is not None:
                    participant.results = new_results
            except (ParticipantNotFound, ValidationError, DuplicateRegistration) as e:
                logger.warning(f"Skipping participant {label} in batch save: {e}")
                report.failed[label] = e.message

        saved = session.save()
        report.saved = saved.saved
        report.failed.update(saved.failed)
        return report
