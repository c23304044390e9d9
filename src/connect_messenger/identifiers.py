"""
Identifier syntax validation and UUID parsing helpers.
"""

import base64
import binascii
import re
import string
import uuid
from typing import Optional

from connect_messenger.errors import IdentifierSyntaxError, SyntaxErrorKind

MIN_LENGTH = 3
MAX_LENGTH = 50

_IDENTIFIER_CHARS = frozenset(string.ascii_letters + string.digits + "-_")
_UUID_NO_HYPHEN = re.compile(r"^(\w{8})(\w{4})(\w{4})(\w{4})(\w{12})$")


def validate_identifier(identifier: Optional[str]) -> None:
    """Check that an identifier is 3-50 ASCII alphanumeric, dash or underscore characters.

    Raises IdentifierSyntaxError describing the first rule that fails.
    """
    if not identifier:
        raise IdentifierSyntaxError(SyntaxErrorKind.EMPTY)
    if len(identifier) < MIN_LENGTH:
        raise IdentifierSyntaxError(SyntaxErrorKind.MIN_LENGTH, MIN_LENGTH)
    if len(identifier) > MAX_LENGTH:
        raise IdentifierSyntaxError(SyntaxErrorKind.MAX_LENGTH, MAX_LENGTH)
    for char in identifier:
        if char not in _IDENTIFIER_CHARS:
            raise IdentifierSyntaxError(SyntaxErrorKind.INVALID_CHAR, char)


def is_valid_identifier(identifier: Optional[str]) -> bool:
    try:
        validate_identifier(identifier)
    except IdentifierSyntaxError:
        return False
    return True


def parse_uuid(text: Optional[str]) -> Optional[uuid.UUID]:
    if text is None:
        return None
    try:
        return uuid.UUID(text)
    except ValueError:
        return None


def encode_uuid_base64(value: uuid.UUID) -> str:
    """URL-safe base64 of the 16 UUID bytes, padding stripped (22 characters)."""
    return base64.urlsafe_b64encode(value.bytes).rstrip(b"=").decode("ascii")


def decode_uuid_base64(text: Optional[str]) -> Optional[uuid.UUID]:
    if text is None:
        return None
    try:
        raw = base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))
        return uuid.UUID(bytes=raw)
    except (binascii.Error, ValueError):
        return None


def parse_id(text: Optional[str]) -> Optional[uuid.UUID]:
    """Parse a subject id in any of its accepted spellings.

    22 chars: base64 (``reBaGYgHQ8OoTqfamvttvA``), 32 chars: hex without
    hyphens, 36 chars: canonical UUID. Anything else yields None.
    """
    if text is None:
        return None
    if len(text) == 22:
        return decode_uuid_base64(text)
    if len(text) == 32:
        match = _UUID_NO_HYPHEN.match(text)
        return parse_uuid("-".join(match.groups())) if match else None
    if len(text) == 36:
        return parse_uuid(text)
    return None
