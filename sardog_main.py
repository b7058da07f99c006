"""
Main application for the SAR dog competition system.

    python sardog_main.py serve [--port 8000]
    python sardog_main.py rating RH-FL-B [--output rating.csv]
    python sardog_main.py protocol <competition-id> [--output protocol.csv]
    python sardog_main.py reports [--output-dir reports_out]
    python sardog_main.py migrate
"""

import argparse
import logging
import os
import sys

from config.config_manager import ConfigManager
from database.competition_repository import CompetitionRepository
from database.database_manager import DatabaseManager
from ranking.rating_processor import RatingProcessor
from reports.report_generator import ReportGenerator

logger = logging.getLogger(__name__)


def configure_logging(config_file: str) -> None:
    config = ConfigManager.load_config(config_file)
    logging.basicConfig(
        level=getattr(logging, str(config.get('log_level', 'INFO')).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SAR dog competition results and rating")
    parser.add_argument('--config', default=os.getenv('SARDOG_CONFIG', 'config.yaml'))
    commands = parser.add_subparsers(dest='command', required=True)

    serve = commands.add_parser('serve', help='run the HTTP API')
    serve.add_argument('--host', default='0.0.0.0')
    serve.add_argument('--port', type=int, default=int(os.getenv('PORT', 8000)))

    rating = commands.add_parser('rating', help='export a discipline rating to CSV')
    rating.add_argument('discipline')
    rating.add_argument('--output')

    protocol = commands.add_parser('protocol', help='export a competition protocol to CSV')
    protocol.add_argument('competition_id')
    protocol.add_argument('--output')

    commands.add_parser('migrate', help='store legacy competition records in the current schema')

    reports = commands.add_parser('reports', help='generate all reports')
    reports.add_argument('--output-dir', default='reports_out')
    return parser


def main(argv=None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.config)

    try:
        if args.command in ('serve', 'migrate'):
            migrated = CompetitionRepository(DatabaseManager(config_file=args.config)).migrate()
            logger.info(f"Migrated {migrated} legacy competitions")
            if args.command == 'migrate':
                return 0

        if args.command == 'serve':
            import uvicorn
            from api.app import create_app

            logger.info(f"Starting API on {args.host}:{args.port}")
            uvicorn.run(create_app(args.config), host=args.host, port=args.port)
            return 0

        db_manager = DatabaseManager(config_file=args.config)
        logger.info(f"Database statistics: {db_manager.get_database_stats()}")
        rating_processor = RatingProcessor(db_manager)
        report_generator = ReportGenerator(db_manager, rating_processor)

        if args.command == 'rating':
            count = report_generator.generate_rating_report(args.discipline, args.output)
            logger.info(f"Exported {count} rating entries for '{args.discipline}'")
        elif args.command == 'protocol':
            count = report_generator.generate_protocol_report(args.competition_id, args.output)
            logger.info(f"Exported protocol with {count} participants")
        elif args.command == 'reports':
            report_results = report_generator.generate_all_reports(args.output_dir)
            logger.info(f"Generated reports: {report_results}")
        return 0

    except Exception as e:
        logger.exception(f"Error in SAR dog competition system: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
