"""
Score derivation: total and qualification tier from the two phase scores.
"""

import logging
import math
from typing import Any, Dict, List, Optional
from models.competition import Participant, Results
from models.errors import ValidationError

logger = logging.getLogger(__name__)

SCORE_FIELDS = ('search', 'obedience')


class ScoreCalculator:
    """Derives total and qualification for a participant's results."""

    def __init__(self, config: Dict[str, Any]):
        self.bands: List[Dict[str, Any]] = config.get('qualification_bands', [])
        self.unclassified_label: str = config.get('unclassified_label', 'Unclassified')
        self.public_minimums: Dict[str, float] = config.get('public_minimums') or {}
        self.below_minimum_label: str = config.get('below_minimum_label', 'Insufficient')

    def qualification_for(self, total: float) -> str:
        """Return the tier whose inclusive band contains total."""
        for band in self.bands:
            if band['min'] <= total <= band['max']:
                return band['label']
        return self.unclassified_label

    @staticmethod
    def parse_score(value: Any) -> Optional[float]:
        """Parse a raw score; empty input clears the field."""
        if value is None:
            return None
        if isinstance(value, str):
            value = value.strip().replace(',', '.')
            if not value:
                return None
        try:
            score = float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Score '{value}' is not a number")
        if not math.isfinite(score) or score < 0:
            raise ValidationError(f"Score '{value}' must be a non-negative number")
        return score

    def derive(self, results: Results) -> Results:
        """
        Recompute total and qualification in place.

        Without any phase score the derived fields and the place are cleared
        together, so a participant never keeps a stale placement.
        """
        if not results.has_scores():
            results.total = None
            results.qualification = None
            results.place = None
            return results

        results.total = (results.search or 0) + (results.obedience or 0)
        results.qualification = self.qualification_for(results.total)
        return results

    def set_score(self, participant: Participant, field: str, value: Any) -> Results:
        """Set one phase score of a participant and rederive."""
        if field not in SCORE_FIELDS:
            raise ValidationError(f"Unknown score field '{field}'")

        results = participant.ensure_results()
        setattr(results, field, self.parse_score(value))
        self.derive(results)
        logger.debug(f"Participant {participant.id}: {field}={getattr(results, field)} "
                     f"total={results.total} qualification={results.qualification}")
        return results

    def public_qualification(self, results: Results) -> Optional[str]:
        """Qualification as published: a phase below its minimum fails the whole run."""
        if not results.has_scores():
            return results.qualification

        for field in SCORE_FIELDS:
            minimum = self.public_minimums.get(field)
            if minimum is not None and (getattr(results, field) or 0) < minimum:
                return self.below_minimum_label
        return self.qualification_for((results.search or 0) + (results.obedience or 0))
