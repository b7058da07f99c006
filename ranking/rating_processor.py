"""
Rating processor for the SAR dog competition system.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from models.competition import Competition, Participant, COMPLETED, CONFIRMED
from models.rating import RatingEntry
from database.competition_repository import CompetitionRepository
from database.profile_repository import ProfileRepository
from utils.text_utils import TextUtils

logger = logging.getLogger(__name__)


class RatingProcessor:
    """Computes the cross-competition rating of a discipline."""

    def __init__(self, database_manager):
        self.db = database_manager
        self.competitions = CompetitionRepository(database_manager)
        self.profiles = ProfileRepository(database_manager)
        self.qualifying_levels: List[str] = list(self.db.config.get('qualifying_levels', []))
        self.top_results: int = int(self.db.config.get('rating_top_results', 2))
        self.fallback_names: Dict[str, str] = self.db.config.get('fallback_names', {})

    def is_qualifying_competition(self, competition: Competition) -> bool:
        """Completed competitions of a qualifying level count toward the rating."""
        return competition.status == COMPLETED and competition.level in self.qualifying_levels

    @staticmethod
    def is_qualifying_result(participant: Participant, discipline: str) -> bool:
        # A total of 0 does not count as a result
        return (participant.status == CONFIRMED
                and TextUtils.same_label(participant.class_name, discipline)
                and participant.results is not None
                and bool(participant.results.total))

    def collect_scores(self, discipline: str,
                       competitions: Optional[List[Competition]] = None) -> Dict[Tuple[str, str], List[float]]:
        """Qualifying totals per (userId, dogId), in competition order."""
        if competitions is None:
            competitions = self.competitions.list_competitions()

        scores: Dict[Tuple[str, str], List[float]] = {}
        for competition in competitions:
            if not self.is_qualifying_competition(competition):
                continue
            for participant in competition.participants:
                if not self.is_qualifying_result(participant, discipline):
                    continue
                key = (participant.user_id, participant.dog_id)
                scores.setdefault(key, []).append(participant.results.total)
        return scores

    def compute_rating(self, discipline: str,
                       competitions: Optional[List[Competition]] = None) -> List[RatingEntry]:
        """
        Rank every athlete and dog pair of a discipline.

        The score is the sum of the pair's best results (two by default);
        ``competitions`` counts every qualifying result, not only the ones
        summed. Equal scores keep their first-seen order.
        """
        if TextUtils.is_blank(discipline):
            return []

        entries = []
        for (user_id, dog_id), totals in self.collect_scores(discipline, competitions).items():
            best = sorted(totals, reverse=True)[:self.top_results]
            athlete, dog, team = self._resolve_names(user_id, dog_id)
            entries.append(RatingEntry(
                athlete=athlete,
                dog=dog,
                team=team,
                score=sum(best),
                competitions=len(totals)
            ))

        entries.sort(key=lambda e: -e.score)
        for place, entry in enumerate(entries, 1):
            entry.place = place

        logger.info(f"Computed rating for '{discipline}' with {len(entries)} entries")
        return entries

    def _resolve_names(self, user_id: str, dog_id: str) -> Tuple[str, str, str]:
        profile = self.profiles.get_profile(user_id)
        dog = self.profiles.find_dog(user_id, dog_id) or {}
        return (
            profile.get('name') or self.fallback_names.get('athlete', 'Unknown participant'),
            dog.get('name') or self.fallback_names.get('dog', 'Unknown dog'),
            profile.get('team') or self.fallback_names.get('team', 'No team')
        )

    def get_rating_statistics(self, discipline: str) -> Dict[str, Any]:
        """Get overall statistics of a discipline rating."""
        entries = self.compute_rating(discipline)
        if not entries:
            return {}

        total_score = sum(e.score for e in entries)
        team_counts: Dict[str, int] = {}
        for entry in entries:
            team_counts[entry.team] = team_counts.get(entry.team, 0) + 1

        return {
            'entries': len(entries),
            'average_score': round(total_score / len(entries), 2),
            'best_score': entries[0].score,
            'results_counted': sum(e.competitions for e in entries),
            'team_distribution': team_counts
        }

    def export_rating_to_csv(self, discipline: str, output_file: str) -> int:
        """
        Export a discipline rating to CSV file.
        Returns the number of entries exported.
        """
        import pandas as pd

        entries = self.compute_rating(discipline)

        if not entries:
            logger.warning(f"No rating entries found for '{discipline}'")
            return 0

        data = []
        for entry in entries:
            data.append({
                'Place': entry.place,
                'Athlete': entry.athlete,
                'Dog': entry.dog,
                'Team': entry.team,
                'Score': entry.score,
                'Competitions': entry.competitions
            })

        df = pd.DataFrame(data)
        df.to_csv(output_file, index=False, encoding='utf-8')

        logger.info(f"Exported {len(entries)} rating entries to {output_file}")
        return len(entries)
