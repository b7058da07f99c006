"""
Request dependencies: services and the calling user.

Authentication happens in front of this service; the gateway forwards the
authenticated user id in the ``X-User-Id`` header.
"""

import logging
from typing import Optional

from fastapi import Depends, Header, Request

from database.competition_manager import CompetitionManager
from database.database_manager import DatabaseManager
from database.profile_repository import ProfileRepository
from models.actor import Actor
from models.errors import Unauthorized
from ranking.rating_processor import RatingProcessor
from registration.registration_manager import RegistrationManager
from reports.report_generator import ReportGenerator
from reports.results_view import ResultsView
from review.review_manager import ReviewManager

logger = logging.getLogger(__name__)


class Services:
    """Engines wired to one database."""

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager
        self.profiles = ProfileRepository(db_manager)
        self.competitions = CompetitionManager(db_manager)
        self.registrations = RegistrationManager(db_manager)
        self.review = ReviewManager(db_manager)
        self.rating = RatingProcessor(db_manager)
        self.views = ResultsView(db_manager)
        self.reports = ReportGenerator(db_manager, self.rating)


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_optional_actor(x_user_id: Optional[str] = Header(None),
                       services: Services = Depends(get_services)) -> Optional[Actor]:
    if not x_user_id or not x_user_id.strip():
        return None
    user_id = x_user_id.strip()
    return Actor(user_id=user_id, role=services.profiles.get_role(user_id))


def get_actor(actor: Optional[Actor] = Depends(get_optional_actor)) -> Actor:
    if actor is None:
        raise Unauthorized()
    return actor
