"""Error taxonomy for the generation and materialization pipeline.

Inside the attempt loop these are carried as values on an AttemptResult;
only caller-input and persistence errors are raised to callers.
"""


class PipelineError(Exception):
    """Base class for pipeline errors."""

    pass


class TransientServiceError(PipelineError):
    """Generative service failed in a way worth retrying."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class QuotaExhaustedError(PipelineError):
    """Generative service reported rate limiting or quota exhaustion."""

    def __init__(self, message: str, status_code: int | None = 429) -> None:
        super().__init__(message)
        self.status_code = status_code


class NormalizationFailure(PipelineError):
    """No JSON object could be isolated from the model reply."""

    pass


class ValidationError(PipelineError):
    """Model reply parsed but its container structure is absent or malformed."""

    pass


class InvalidRequestError(PipelineError):
    """Caller supplied unusable input (missing subject, missing trip id)."""

    pass


class TripNotFound(PipelineError):
    """Target trip does not exist."""

    pass


class Forbidden(PipelineError):
    """Caller does not own the target trip."""

    pass


class CommitError(PipelineError):
    """Persistence failed while materializing an itinerary; nothing was written."""

    pass
