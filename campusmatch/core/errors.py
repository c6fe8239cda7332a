"""Error taxonomy raised by the service layer.

Every error carries a stable ``kind`` and the HTTP status the request
boundary answers with. The handler registered in ``campusmatch.main`` turns
them into ``{"success": false, "kind": ..., "message": ...}``.
"""
from fastapi import status


class DomainError(Exception):
    kind: str = "error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "The request could not be completed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class SelfActionError(DomainError):
    kind = "self_action"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "You cannot perform this action on yourself."


class NotFoundError(DomainError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found."


class DuplicateActionError(DomainError):
    kind = "duplicate_action"
    status_code = status.HTTP_409_CONFLICT
    default_message = "This action has already been recorded."


class AccessDeniedError(DomainError):
    kind = "access_denied"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied."


class InactiveMatchError(DomainError):
    kind = "inactive_match"
    status_code = status.HTTP_409_CONFLICT
    default_message = "This match is no longer active."


class ValidationError(DomainError):
    kind = "validation"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Invalid input."


class PersistenceError(DomainError):
    kind = "persistence"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "The change could not be saved. Nothing was modified."
