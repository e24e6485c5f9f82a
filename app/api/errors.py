from fastapi import HTTPException, status

from app.core.exceptions import (
    AIServiceError,
    ContentValidationError,
    GenerationFailedError,
    NoRequirementsFoundError,
    TestGeneratorError,
)

_STATUS_BY_ERROR = (
    (ContentValidationError, status.HTTP_400_BAD_REQUEST),
    (NoRequirementsFoundError, status.HTTP_400_BAD_REQUEST),
    (AIServiceError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (GenerationFailedError, status.HTTP_502_BAD_GATEWAY),
)


def to_http_exception(exc: TestGeneratorError, details: str = "") -> HTTPException:
    """Translate a domain error into the error/details/suggestion payload."""
    code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, error_status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            code = error_status
            break
    return HTTPException(
        status_code=code,
        detail={
            "error": exc.message,
            "details": details or str(exc),
            "suggestion": exc.suggestion or "Please try again",
        },
    )
