"""
Error types raised by the competition engines.

Every error carries a short, user-presentable message. The HTTP layer maps
the four category bases to status codes; engines never catch them.
"""


class CompetitionError(Exception):
    """Base class for all domain errors."""

    default_message = "Competition error"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(CompetitionError):
    default_message = "Invalid request"


class AuthorizationError(CompetitionError):
    default_message = "Forbidden"


class NotFoundError(CompetitionError):
    default_message = "Not found"


class ConflictError(CompetitionError):
    default_message = "Conflict"


class Unauthorized(AuthorizationError):
    default_message = "Unauthorized"


class Forbidden(AuthorizationError):
    default_message = "Forbidden"


class InvalidCategory(ValidationError):
    default_message = "Class is not offered by this competition"


class CompetitionNotFound(NotFoundError):
    default_message = "Competition not found"


class ParticipantNotFound(NotFoundError):
    default_message = "Participant not found"


class DogNotFound(NotFoundError):
    default_message = "Dog not found"


class DuplicateRegistration(ConflictError):
    default_message = "This dog is already registered in this category"


class RegistrationClosed(ConflictError):
    default_message = "Registration closed"


class CompetitionFull(ConflictError):
    default_message = "Competition is at capacity"


class ConcurrentModification(ConflictError):
    default_message = "Data was changed by another request, reload and try again"
