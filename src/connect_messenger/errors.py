"""
Messenger error types.

Every error carries a machine-readable ``code`` so callers can branch on the
failure kind without string matching on the message.
"""

from enum import Enum
from typing import Any, Optional


class MessengerError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class InvalidMessageError(MessengerError):
    """A single message failed its own ``validate()`` check."""

    def __init__(self, message: str, message_type: Optional[str] = None, code: str = "invalid_message"):
        super().__init__(code, message, {"type": message_type} if message_type else None)
        self.message_type = message_type


class SyntaxErrorKind(Enum):
    EMPTY = "Identifier cannot be empty"
    MIN_LENGTH = "Identifier cannot be less than %s characters"
    MAX_LENGTH = "Identifier cannot be greater than %s characters"
    INVALID_CHAR = "Identifier contains invalid character '%s'"


class IdentifierSyntaxError(InvalidMessageError):
    def __init__(self, error: SyntaxErrorKind, *error_args: Any):
        super().__init__(error.value % error_args, code="identifier_syntax")
        self.error = error
        self.error_args = tuple(error_args)


class ValidationError(MessengerError):
    """One or more messages in an encode batch were invalid. Nothing was emitted."""

    def __init__(self, failures: list[tuple[int, InvalidMessageError]]):
        summary = "; ".join(f"[{i}] {e}" for i, e in failures)
        super().__init__(
            "validation_error",
            f"{len(failures)} invalid message(s): {summary}",
            {"failures": [{"index": i, "error": str(e), "type": e.message_type} for i, e in failures]},
        )
        self.failures = failures


class RegistrationError(MessengerError):
    def __init__(self, message: str, code: str = "registration_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class ConflictError(RegistrationError):
    def __init__(self, message_type: str, existing: type, requested: type):
        super().__init__(
            f"A Message type named '{message_type}' has already been registered to {existing.__name__}",
            code="type_conflict",
            details={"type": message_type, "existing": existing.__qualname__, "requested": requested.__qualname__},
        )


class MessageParseError(MessengerError):
    def __init__(self, message: str, code: str = "parse_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)
