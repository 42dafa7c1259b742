# File: services/errors.py
"""
Error taxonomy shared by the services and translated to HTTP by the routers.

Per-file failures (extraction, summarization) never leave the orchestrator;
they are captured into the result list instead.
"""


class PaperStudioError(Exception):
    """Base class for errors raised by the service layer."""
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(PaperStudioError):
    """Bad signup/login input or malformed request payload."""
    status_code = 400


class AuthError(PaperStudioError):
    """Missing, expired or revoked session, or wrong credentials."""
    status_code = 401


class ConflictError(PaperStudioError):
    """Email already registered."""
    status_code = 409


class ExtractionError(PaperStudioError):
    """The uploaded payload could not be parsed as a PDF."""
    status_code = 422


class SummarizationError(PaperStudioError):
    """The model provider failed or could not be reached."""
    status_code = 502
