"""Exception hierarchy shared by services and the session handler.

Every error a user can trigger derives from ``TrainingDiaryError`` and is
turned into a notification by the view controller; none of them end the
session.
"""

from typing import Optional


class TrainingDiaryError(Exception):
    """Base class for application errors.

    Attributes:
        message: Human-readable message shown to the user.
    """

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(message)


class AuthError(TrainingDiaryError):
    """Invalid credentials, duplicate account or weak password."""


class ValidationError(TrainingDiaryError):
    """A local form constraint failed; nothing was sent to the store."""


class StoreError(TrainingDiaryError):
    """The document store is unavailable or denied the operation."""

    def __init__(self, message: str = "Document store error", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ReadError(StoreError):
    """Reading or subscribing to a document or collection failed."""


class WriteError(StoreError):
    """Creating, replacing or deleting a document failed."""


class PlanGenerationError(TrainingDiaryError):
    """An AI plan generation attempt failed; the draft is left untouched."""


class SchemaError(PlanGenerationError):
    """The AI response does not have the expected structure."""


class EmptyPlanError(PlanGenerationError):
    """The AI response contained no usable training day."""


class AIServiceError(PlanGenerationError):
    """The AI endpoint could not be reached or answered with an error."""

    def __init__(self, message: str = "AI service error", status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ContentBlockedError(AIServiceError):
    """The AI endpoint refused to answer because of its safety filters."""


class PartialPlanWarning(UserWarning):
    """The generated plan has fewer days than the canonical split."""

    def __init__(self, day_count: int, expected: int):
        self.day_count = day_count
        self.expected = expected
        super().__init__(
            f"Generated plan has {day_count} of {expected} expected days"
        )
