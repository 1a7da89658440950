"""
Error taxonomy for content generation.
"""

from enum import Enum


class GenerationErrorKind(Enum):
    """Why a generation failed."""
    AUTH = "auth_error"
    MALFORMED_RESPONSE = "malformed_response"
    TRANSPORT = "transport_error"


class GenerationError(Exception):
    """Raised when generating or decoding content fails."""

    def __init__(self, kind: GenerationErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def is_auth_error(self) -> bool:
        return self.kind == GenerationErrorKind.AUTH

    def __repr__(self) -> str:
        return f"GenerationError({self.kind.value}, {self.message!r})"


class GenerationInProgressError(Exception):
    """Raised when a generation is requested while another one is running."""
    pass
