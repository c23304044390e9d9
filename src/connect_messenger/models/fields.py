"""
Per-field enum wire policy.

Enum fields are always read case-insensitively by member name. How they are
written is declared on the field itself, so one legacy lowercase enum does not
force a convention on every other enum.
"""

from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator, PlainSerializer


class EnumCase(str, Enum):
    """Case convention used when writing an enum member name to the wire."""
    NAME = "name"
    LOWER = "lower"
    UPPER = "upper"

    def apply(self, name: str) -> str:
        if self is EnumCase.LOWER:
            return name.lower()
        if self is EnumCase.UPPER:
            return name.upper()
        return name


def read_enum(enum_cls: type[Enum], value: Any) -> Optional[Enum]:
    """Match a wire value against the declared member names, ignoring case."""
    if value is None or isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        member = enum_cls.__members__.get(value.upper())
        if member is not None:
            return member
    raise ValueError(f"{value!r} is not a valid {enum_cls.__name__}")


def wire_enum(enum_cls: type[Enum], write: EnumCase = EnumCase.NAME) -> Any:
    """Build an ``Optional[enum_cls]`` field type carrying its own read/write policy.

    Usage::

        WireStatus = wire_enum(Status, EnumCase.LOWER)

        class StatusMessage(IdentifiableMessage):
            status: WireStatus = None
    """
    return Annotated[
        Optional[enum_cls],
        BeforeValidator(lambda value: read_enum(enum_cls, value)),
        PlainSerializer(lambda member: write.apply(member.name), return_type=str, when_used="unless-none"),
    ]
