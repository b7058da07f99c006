"""
Rating data models for the SAR dog competition system.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Any


@dataclass
class RatingEntry:
    """One athlete and dog pair in a discipline rating."""
    athlete: str
    dog: str
    team: str
    score: float
    competitions: int
    place: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SaveReport:
    """Outcome of a batch save: which participants landed and which did not."""
    saved: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.failed

    def to_dict(self) -> Dict[str, Any]:
        return {'success': self.success, 'saved': list(self.saved), 'failed': dict(self.failed)}
