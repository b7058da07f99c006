"""
Competition views with participants hydrated from profiles and dogs.
"""

import logging
from typing import Any, Dict, List
from models.actor import Actor
from models.competition import Competition, Participant, CONFIRMED
from database.competition_repository import CompetitionRepository
from database.profile_repository import ProfileRepository
from review.scoring import ScoreCalculator

logger = logging.getLogger(__name__)

NO_PLACE = 999


class ResultsView:
    """Builds the organizer details view and the public results view."""

    def __init__(self, database_manager):
        self.db_manager = database_manager
        self.competitions = CompetitionRepository(database_manager)
        self.profiles = ProfileRepository(database_manager)
        self.scores = ScoreCalculator(database_manager.config)
        self.unknown = database_manager.config.get('fallback_names', {}).get('unknown', 'Unknown')

    def hydrate(self, participant: Participant, public: bool = False) -> Dict[str, Any]:
        """
        Participant JSON with user and dog display fields added.

        The public form carries the published qualification, which applies
        the phase minimums on top of the total.
        """
        profile = self.profiles.get_profile(participant.user_id)
        dog = self.profiles.find_dog(participant.user_id, participant.dog_id) or {}

        data = participant.to_dict()
        data.update({
            'category': participant.class_name,
            'userName': profile.get('name') or self.unknown,
            'dogName': dog.get('name') or self.unknown,
            'dogBirth': dog.get('birth') or None,
            'dogBreed': dog.get('breed') or dog.get('pedigree') or '',
            'dogPedigree': dog.get('pedigree') or '',
            'dogChip': dog.get('chip') or ''
        })
        if public and participant.results is not None and participant.results.has_scores():
            data['results']['qualification'] = self.scores.public_qualification(participant.results)
        return data

    def details(self, competition_id: str, actor: Actor) -> Dict[str, Any]:
        """Full competition for its organizer or an admin, every participant included."""
        competition = self.competitions.get(competition_id)
        actor.require_manager(competition)

        data = competition.to_dict()
        data['participants'] = [self.hydrate(p) for p in competition.participants]
        return data

    def public_results(self, competition_id: str) -> Dict[str, Any]:
        """Public view: confirmed participants only, grouped by class."""
        competition = self.competitions.get(competition_id)
        confirmed = [self.hydrate(p, public=True) for p in competition.participants if p.status == CONFIRMED]

        return {
            'id': competition.id,
            'name': competition.name,
            'date': competition.start_date,
            'location': competition.location,
            'participants': confirmed,
            'groups': self.group_results(confirmed)
        }

    @staticmethod
    def has_results(participant: Dict[str, Any]) -> bool:
        results = participant.get('results') or {}
        return any(results.get(key) is not None for key in ('search', 'obedience', 'total', 'place'))

    @staticmethod
    def place_of(participant: Dict[str, Any]) -> int:
        return (participant.get('results') or {}).get('place') or NO_PLACE

    def group_results(self, participants: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Per class: participants with results ordered by place, then those still without."""
        groups: Dict[str, Dict[str, List[Dict[str, Any]]]] = {}
        for participant in participants:
            key = participant.get('class') or ''
            group = groups.setdefault(key, {'withResults': [], 'withoutResults': []})
            if self.has_results(participant):
                group['withResults'].append(participant)
            else:
                group['withoutResults'].append(participant)

        output = []
        for class_name, group in groups.items():
            group['withResults'].sort(key=self.place_of)
            output.append({
                'class': class_name,
                'withResults': group['withResults'],
                'withoutResults': group['withoutResults']
            })
        return output

    def protocol_rows(self, competition: Competition) -> List[Dict[str, Any]]:
        """Flat protocol rows of confirmed participants, grouped by class and ordered by place."""
        rows = []
        confirmed = [self.hydrate(p, public=True) for p in competition.participants
                     if p.status == CONFIRMED and p.class_name]
        for group in self.group_results(confirmed):
            for participant in group['withResults'] + group['withoutResults']:
                results = participant.get('results') or {}
                handler = participant.get('handlerName')
                owner = participant['userName']
                if handler and handler != owner:
                    owner = f"{owner} / {handler}"
                rows.append({
                    'Class': group['class'],
                    'Place': results.get('place'),
                    'Owner/Handler': owner,
                    'Dog': participant['dogName'],
                    'Birth Date': participant.get('dogBirth'),
                    'Breed': participant.get('dogBreed'),
                    'Pedigree': participant.get('dogPedigree'),
                    'Chip': participant.get('dogChip'),
                    'Search': results.get('search'),
                    'Obedience': results.get('obedience'),
                    'Total': results.get('total'),
                    'Qualification': results.get('qualification')
                })
        return rows
