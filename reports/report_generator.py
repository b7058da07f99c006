"""
Report generator for the SAR dog competition system.
"""

import os
import logging
import pandas as pd
from typing import Dict, List, Optional
from models.actor import Actor
from models.competition import Competition, COMPLETED
from database.database_manager import DatabaseManager
from database.competition_repository import CompetitionRepository
from ranking.rating_processor import RatingProcessor
from reports.results_view import ResultsView

logger = logging.getLogger(__name__)

PROTOCOL_COLUMNS = ['Class', 'Place', 'Owner/Handler', 'Dog', 'Birth Date', 'Breed', 'Pedigree',
                    'Chip', 'Search', 'Obedience', 'Total', 'Qualification']


def safe_file_name(name: str) -> str:
    """Sanitize a competition or class name for use in a file name."""
    safe = "".join(c for c in name if c.isalnum() or c in (' ', '-', '_')).strip()
    return safe.replace(' ', '_') or 'unnamed'


class ReportGenerator:
    """Generates protocol, rating and statistics reports."""

    def __init__(self, database_manager: DatabaseManager, rating_processor: Optional[RatingProcessor] = None):
        self.db_manager = database_manager
        self.competitions = CompetitionRepository(database_manager)
        self.results_view = ResultsView(database_manager)
        self.rating_processor = rating_processor or RatingProcessor(database_manager)

    def protocol_frame(self, competition: Competition) -> pd.DataFrame:
        rows = self.results_view.protocol_rows(competition)
        return pd.DataFrame(rows, columns=PROTOCOL_COLUMNS)

    def protocol_csv(self, competition_id: str, actor: Actor) -> str:
        """Protocol of a competition as CSV text, for its organizer or an admin."""
        competition = self.competitions.get(competition_id)
        actor.require_manager(competition)
        return self.protocol_frame(competition).to_csv(index=False)

    def generate_protocol_report(self, competition_id: str, output_file: Optional[str] = None) -> int:
        """
        Generate the results protocol of one competition.
        Returns the number of participants in the report.
        """
        competition = self.competitions.get(competition_id)
        if output_file is None:
            output_file = f"protocol_{safe_file_name(competition.name)}.csv"

        df = self.protocol_frame(competition)
        if df.empty:
            logger.warning(f"No confirmed participants for protocol of '{competition.name}'")
            return 0

        df.to_csv(output_file, index=False, encoding='utf-8')
        logger.info(f"Generated protocol for '{competition.name}' with {len(df)} participants: {output_file}")
        return len(df)

    def generate_rating_report(self, discipline: str, output_file: Optional[str] = None) -> int:
        """Generate the rating of one discipline."""
        if output_file is None:
            output_file = f"rating_{safe_file_name(discipline)}.csv"
        return self.rating_processor.export_rating_to_csv(discipline, output_file)

    def rating_disciplines(self) -> List[str]:
        """Class labels that occur in qualifying competitions, first spelling wins."""
        disciplines: Dict[str, str] = {}
        for competition in self.competitions.list_competitions():
            if not self.rating_processor.is_qualifying_competition(competition):
                continue
            for participant in competition.participants:
                if participant.class_name:
                    disciplines.setdefault(participant.class_name.casefold(), participant.class_name)
        return sorted(disciplines.values())

    def generate_statistics_report(self, output_file: str = "statistics_report.csv") -> int:
        """Generate a statistics report over competitions and participants."""
        competitions = self.competitions.list_competitions()

        if not competitions:
            logger.warning("No competitions found for statistics report")
            return 0

        data = [{'Category': 'Overall', 'Subcategory': 'Competitions', 'Count': len(competitions)}]

        status_counts: Dict[str, int] = {}
        participant_counts: Dict[str, int] = {}
        class_counts: Dict[str, int] = {}
        for competition in competitions:
            status_counts[competition.status] = status_counts.get(competition.status, 0) + 1
            for participant in competition.participants:
                participant_counts[participant.status] = participant_counts.get(participant.status, 0) + 1
                key = participant.class_name or '-'
                class_counts[key] = class_counts.get(key, 0) + 1

        for status, count in status_counts.items():
            data.append({'Category': 'Competition Status', 'Subcategory': status, 'Count': count})
        for status, count in participant_counts.items():
            data.append({'Category': 'Participant Status', 'Subcategory': status, 'Count': count})
        for class_name, count in sorted(class_counts.items()):
            data.append({'Category': 'Class', 'Subcategory': class_name, 'Count': count})

        df = pd.DataFrame(data)
        df.to_csv(output_file, index=False, encoding='utf-8')

        logger.info(f"Generated statistics report: {output_file}")
        return len(data)

    def generate_all_reports(self, output_directory: str = "reports_out") -> Dict[str, int]:
        """Generate protocols of completed competitions, ratings and statistics."""
        os.makedirs(output_directory, exist_ok=True)

        report_results = {}

        for competition in self.competitions.list_competitions():
            if competition.status != COMPLETED:
                continue
            name = safe_file_name(competition.name)
            protocol_file = os.path.join(output_directory, f"protocol_{name}.csv")
            report_results[f'protocol_{name}'] = self.generate_protocol_report(competition.id, protocol_file)

        for discipline in self.rating_disciplines():
            name = safe_file_name(discipline)
            rating_file = os.path.join(output_directory, f"rating_{name}.csv")
            report_results[f'rating_{name}'] = self.generate_rating_report(discipline, rating_file)

        stats_report = os.path.join(output_directory, "statistics_report.csv")
        report_results['statistics'] = self.generate_statistics_report(stats_report)

        logger.info(f"Generated all reports in directory: {output_directory}")
        return report_results
