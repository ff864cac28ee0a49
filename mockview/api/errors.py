"""
Maps engine errors to HTTP responses.

Retryable generation failures become 503 "try again" responses; invariant
and consistency failures become 409 so the client resynchronizes.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from mockview.core.errors import (
    GenerationError,
    InterviewEngineError,
    InterviewNotFound,
    InvariantViolation,
    StateInconsistency,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_CODES: list[tuple[type[InterviewEngineError], int]] = [
    (ValidationError, 422),
    (InterviewNotFound, 404),
    (GenerationError, 503),
    (StateInconsistency, 409),
    (InvariantViolation, 409),
]

USER_GUIDANCE = {
    503: "The interviewer is temporarily unavailable. Please try again.",
    409: "Interview state is out of sync. Reload the interview and try again.",
}


def status_for(error: InterviewEngineError) -> int:
    for error_type, status in STATUS_CODES:
        if isinstance(error, error_type):
            return status
    return 500


async def engine_error_handler(request: Request, exc: InterviewEngineError) -> JSONResponse:
    """FastAPI exception handler for all engine errors."""
    status = status_for(exc)

    if isinstance(exc, StateInconsistency):
        logger.error(f"State inconsistency on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{exc.code} on {request.url.path}: {exc.message}")

    body = exc.to_dict()
    if status in USER_GUIDANCE:
        body["guidance"] = USER_GUIDANCE[status]

    return JSONResponse(status_code=status, content={"error": body})
