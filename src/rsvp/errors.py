"""Error kinds surfaced by the RSVP flow.

Transport failures are converted into one of these at the boundary where they
happen, so the state machine only ever sees an ``RSVPError``. Every error
carries a short message that can be shown to the guest as-is.
"""

from enum import Enum


class ErrorKind(str, Enum):
    NETWORK = "network"
    TIMEOUT = "timeout"
    INVALID_RESPONSE = "invalid_response"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    DEADLINE_EXCEEDED = "deadline_exceeded"


class RSVPError(Exception):
    kind: ErrorKind = ErrorKind.NETWORK
    default_message = "No pudimos registrar la confirmación."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NetworkError(RSVPError):
    kind = ErrorKind.NETWORK
    default_message = "No pudimos conectar con el servidor. Intenta nuevamente."


class RequestTimeoutError(RSVPError):
    kind = ErrorKind.TIMEOUT
    default_message = "El servidor tardó demasiado en responder. Intenta nuevamente."


class InvalidResponseError(RSVPError):
    kind = ErrorKind.INVALID_RESPONSE
    default_message = "Respuesta inválida del servidor."


class PartyNotFoundError(RSVPError):
    """No registered party for the token. Callers fall back to a single guest."""

    kind = ErrorKind.INVALID_RESPONSE
    default_message = "No encontramos un grupo para esta invitación."


class RSVPValidationError(RSVPError):
    kind = ErrorKind.VALIDATION
    default_message = "Revisa la información del formulario."


class IncompleteAnswersError(RSVPValidationError):
    default_message = "Selecciona una opción para cada invitado."


class StatusPendingError(RSVPValidationError):
    default_message = (
        "Estamos verificando una confirmación previa. Intenta nuevamente en unos segundos."
    )


class AlreadyConfirmedError(RSVPValidationError):
    default_message = "Ya registramos tu confirmación previamente."


class ConflictError(RSVPError):
    """The spreadsheet already holds a submission for this token."""

    kind = ErrorKind.CONFLICT
    default_message = "Ya registramos tu confirmación previamente."

    def __init__(self, status: dict | None = None, message: str | None = None) -> None:
        self.status = status
        super().__init__(message)


class DeadlineExceededError(RSVPError):
    kind = ErrorKind.DEADLINE_EXCEEDED
    default_message = "Cerramos confirmaciones. Escríbenos si necesitas ayuda."

    def __init__(self, deadline_label: str | None = None) -> None:
        message = None
        if deadline_label:
            message = (
                f"Cerramos confirmaciones el {deadline_label}. Escríbenos si necesitas ayuda."
            )
        super().__init__(message)


class SubmissionInProgressError(RSVPValidationError):
    default_message = "Estamos enviando tu confirmación. Espera un momento."
