"""
HTTP API of the SAR dog competition service.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from api.dependencies import Services, get_actor, get_services
from api.schemas import BatchSaveRequest, CompetitionPayload, ParticipantUpdate, RegisterRequest
from database.database_manager import DatabaseManager
from models.actor import Actor
from models.competition import Participant
from models.errors import AuthorizationError, CompetitionError, ConflictError, NotFoundError, Unauthorized
from review.review_manager import ParticipantRef

logger = logging.getLogger(__name__)


def status_code_for(error: CompetitionError) -> int:
    if isinstance(error, Unauthorized):
        return 401
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, ConflictError):
        return 409
    return 400


def participant_json(participant: Participant) -> Dict[str, Any]:
    data = participant.to_dict()
    data['category'] = participant.class_name
    return data


def create_app(config_file: str = "config.yaml", db_path: Optional[str] = None) -> FastAPI:
    """Build the API around a database; tests pass a temporary db_path."""
    app = FastAPI(title="SAR Dog Competitions API", version="1.0.0")
    app.state.services = Services(DatabaseManager(db_path, config_file))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CompetitionError)
    async def competition_error_handler(request: Request, exc: CompetitionError):
        status_code = status_code_for(exc)
        logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
        return JSONResponse(status_code=status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = ", ".join(".".join(str(part) for part in error['loc']) for error in exc.errors())
        return JSONResponse(status_code=400, content={"error": f"Invalid request: {fields}"})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # ----------------------- Competitions -----------------------

    @app.get("/competitions")
    def list_competitions(services: Services = Depends(get_services)) -> List[Dict[str, Any]]:
        return [c.to_dict() for c in services.competitions.list_competitions()]

    @app.post("/competitions")
    def create_competition(payload: CompetitionPayload, actor: Actor = Depends(get_actor),
                           services: Services = Depends(get_services)):
        competition = services.competitions.create_competition(actor, payload.model_dump(exclude_none=True))
        return competition.to_dict()

    @app.put("/competitions/{competition_id}")
    def update_competition(competition_id: str, payload: CompetitionPayload,
                           actor: Actor = Depends(get_actor), services: Services = Depends(get_services)):
        competition = services.competitions.update_competition(
            actor, competition_id, payload.model_dump(exclude_none=True))
        return competition.to_dict()

    @app.delete("/competitions/{competition_id}")
    def delete_competition(competition_id: str, actor: Actor = Depends(get_actor),
                           services: Services = Depends(get_services)):
        services.competitions.delete_competition(actor, competition_id)
        return {"success": True}

    # ----------------------- Registration -----------------------

    @app.post("/competitions/{competition_id}/register")
    def register(competition_id: str, body: RegisterRequest, actor: Actor = Depends(get_actor),
                 services: Services = Depends(get_services)):
        services.registrations.register(
            competition_id, actor, body.dogId, body.category,
            handler_name=body.handlerName, documents=body.documents)
        return {"success": True}

    @app.get("/profile/registrations")
    def my_registrations(actor: Actor = Depends(get_actor), services: Services = Depends(get_services)):
        return services.registrations.list_registrations(actor)

    # ----------------------- Review & scoring -----------------------

    @app.put("/competitions/{competition_id}/participants")
    def update_participant(competition_id: str, body: ParticipantUpdate, actor: Actor = Depends(get_actor),
                           services: Services = Depends(get_services)):
        ref = ParticipantRef(participant_id=body.participantId, user_id=body.userId,
                             dog_id=body.dogId, class_name=body.category)
        results = body.results
        if body.status and (results is None or set(results) <= {'notes'}):
            # Status decision, possibly with a rejection reason
            participant = services.review.set_status(
                competition_id, actor, ref, body.status,
                reason=(results or {}).get('notes'), category=body.category)
        else:
            participant = services.review.update_participant(
                competition_id, actor, ref, status=body.status, results=results, category=body.category)
        return participant_json(participant)

    @app.post("/competitions/{competition_id}/placements")
    def compute_placements(competition_id: str, actor: Actor = Depends(get_actor),
                           services: Services = Depends(get_services)):
        session = services.review.compute_placements(competition_id, actor)
        return [participant_json(p) for p in session.participants]

    @app.post("/competitions/{competition_id}/participants/save")
    def save_participants(competition_id: str, body: BatchSaveRequest, actor: Actor = Depends(get_actor),
                          services: Services = Depends(get_services)):
        report = services.review.save_participants(
            competition_id, actor, [p.model_dump() for p in body.participants])
        return report.to_dict()

    # ----------------------- Views & reports -----------------------

    @app.get("/competitions/{competition_id}/details")
    def competition_details(competition_id: str, actor: Actor = Depends(get_actor),
                            services: Services = Depends(get_services)):
        return services.views.details(competition_id, actor)

    @app.get("/competitions/{competition_id}/results")
    def competition_results(competition_id: str, services: Services = Depends(get_services)):
        return services.views.public_results(competition_id)

    @app.get("/competitions/{competition_id}/protocol", response_class=PlainTextResponse)
    def competition_protocol(competition_id: str, actor: Actor = Depends(get_actor),
                             services: Services = Depends(get_services)):
        csv_text = services.reports.protocol_csv(competition_id, actor)
        return PlainTextResponse(csv_text, media_type="text/csv")

    @app.get("/rating")
    def rating(discipline: str = Query(..., description="Class label, e.g. RH-FL-B"),
               services: Services = Depends(get_services)):
        return [entry.to_dict() for entry in services.rating.compute_rating(discipline)]

    return app
