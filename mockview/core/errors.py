"""
Error taxonomy for the interview engine.

Every failure the engine reports is one of these types. The API layer maps
``retryable`` errors to "try again" guidance and the rest to hard failures
that require the client to resynchronize.
"""


class InterviewEngineError(Exception):
    """Base class for all typed engine failures."""

    code = "ENGINE_ERROR"
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "retryable": self.retryable}


class ValidationError(InterviewEngineError):
    """Malformed plan input; the interview never starts."""

    code = "VALIDATION_ERROR"


class InterviewNotFound(InterviewEngineError):
    """No interview with the given id."""

    code = "INTERVIEW_NOT_FOUND"


class GenerationError(InterviewEngineError):
    """Base class for generation backend failures. Retryable by the caller."""

    code = "GENERATION_ERROR"
    retryable = True

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class GenerationUnavailable(GenerationError):
    """Backend unreachable or erroring after the retry budget was spent."""

    code = "GENERATION_UNAVAILABLE"


class MalformedGenerationOutput(GenerationError):
    """Backend responded, but the payload never matched the expected schema."""

    code = "MALFORMED_GENERATION_OUTPUT"


class StateInconsistency(InterviewEngineError):
    """In-progress interview without an open question. Not auto-healed."""

    code = "STATE_INCONSISTENCY"


class InvariantViolation(InterviewEngineError):
    """Request would break an engine invariant; rejected without mutation."""

    code = "INVARIANT_VIOLATION"
