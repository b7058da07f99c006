"""
Competition, participant and results data models.

The stored representation is camelCase JSON; these dataclasses convert from
and to it. Fields the models do not know about are kept in ``extra`` so a
read-modify-write never drops data written by other clients.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

PLANNED = 'planned'
REGISTRATION_OPEN = 'registration_open'
REGISTRATION_CLOSED = 'registration_closed'
COMPLETED = 'completed'
COMPETITION_STATUSES = (PLANNED, REGISTRATION_OPEN, REGISTRATION_CLOSED, COMPLETED)

REGISTERED = 'registered'
CONFIRMED = 'confirmed'
REJECTED = 'rejected'
PARTICIPANT_STATUSES = (REGISTERED, CONFIRMED, REJECTED)


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == '':
        return None
    return float(value)


def _to_int(value: Any) -> Optional[int]:
    if value is None or value == '':
        return None
    return int(value)


@dataclass
class Results:
    """Scores and derived standing of one participant."""
    search: Optional[float] = None
    obedience: Optional[float] = None
    total: Optional[float] = None
    qualification: Optional[str] = None
    place: Optional[int] = None
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['Results']:
        if data is None:
            return None
        return cls(
            search=_to_float(data.get('search')),
            obedience=_to_float(data.get('obedience')),
            total=_to_float(data.get('total')),
            qualification=data.get('qualification'),
            place=_to_int(data.get('place')),
            notes=data.get('notes')
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'search': self.search,
            'obedience': self.obedience,
            'total': self.total,
            'qualification': self.qualification,
            'place': self.place,
            'notes': self.notes
        }
        return {key: value for key, value in data.items() if value is not None}

    def has_scores(self) -> bool:
        return self.search is not None or self.obedience is not None


@dataclass
class Participant:
    """Registration of one dog, handled by one athlete, in one class."""
    id: Optional[str]
    user_id: str
    dog_id: str
    class_name: Optional[str]
    status: str = REGISTERED
    handler_name: Optional[str] = None
    documents: List[Any] = field(default_factory=list)
    date: Optional[str] = None
    results: Optional[Results] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN_KEYS = ('id', 'userId', 'dogId', 'class', 'status', 'handlerName',
                   'documents', 'date', 'results')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Participant':
        return cls(
            id=data.get('id'),
            user_id=data.get('userId'),
            dog_id=data.get('dogId'),
            class_name=data.get('class'),
            status=data.get('status') or REGISTERED,
            handler_name=data.get('handlerName'),
            documents=list(data.get('documents') or []),
            date=data.get('date'),
            results=Results.from_dict(data.get('results')),
            extra={k: v for k, v in data.items() if k not in cls._KNOWN_KEYS}
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            'id': self.id,
            'userId': self.user_id,
            'dogId': self.dog_id,
            'class': self.class_name,
            'status': self.status,
            'documents': list(self.documents)
        })
        if self.handler_name:
            data['handlerName'] = self.handler_name
        if self.date:
            data['date'] = self.date
        if self.results is not None:
            data['results'] = self.results.to_dict()
        return data

    def ensure_results(self) -> Results:
        if self.results is None:
            self.results = Results()
        return self.results

    def matches(self, user_id: str, dog_id: str, class_name: Optional[str] = None) -> bool:
        """Composite-key match used for legacy addressing."""
        if self.user_id != user_id or self.dog_id != dog_id:
            return False
        return class_name is None or self.class_name == class_name


@dataclass
class Competition:
    """A competition and its embedded participant list."""
    id: str
    name: str
    organizer_id: Optional[str]
    status: str = 'planned'
    level: str = ''
    location: str = ''
    description: str = ''
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    max_participants: int = 0
    judges: List[str] = field(default_factory=list)
    participants: List[Participant] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN_KEYS = ('id', 'name', 'organizerId', 'status', 'level', 'location',
                   'description', 'startDate', 'date', 'endDate', 'categories',
                   'maxParticipants', 'judges', 'participants')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Competition':
        return cls(
            id=data.get('id'),
            name=data.get('name') or '',
            organizer_id=data.get('organizerId'),
            status=data.get('status') or PLANNED,
            level=data.get('level') or '',
            location=data.get('location') or '',
            description=data.get('description') or '',
            start_date=data.get('startDate') or data.get('date'),
            end_date=data.get('endDate'),
            categories=list(data.get('categories') or []),
            max_participants=_to_int(data.get('maxParticipants')) or 0,
            judges=list(data.get('judges') or []),
            participants=[Participant.from_dict(p) for p in data.get('participants') or []],
            extra={k: v for k, v in data.items() if k not in cls._KNOWN_KEYS}
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            'id': self.id,
            'name': self.name,
            'organizerId': self.organizer_id,
            'status': self.status,
            'level': self.level,
            'location': self.location,
            'description': self.description,
            'startDate': self.start_date,
            'date': self.start_date,
            'endDate': self.end_date,
            'categories': list(self.categories),
            'maxParticipants': self.max_participants,
            'judges': list(self.judges),
            'participants': [p.to_dict() for p in self.participants]
        })
        return data

    def find_participant(self, participant_id: str) -> Optional[Participant]:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def active_participants(self) -> List[Participant]:
        """Participants whose application has not been rejected."""
        return [p for p in self.participants if p.status != REJECTED]
