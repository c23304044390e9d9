"""
Message base types.

A concrete message declares its wire discriminator as a class constant::

    class PingMessage(Message):
        message_type: ClassVar[str] = "ping"

        payload: Optional[str] = None

        def validate(self) -> None:
            if self.payload is None:
                raise self.invalid("ping payload cannot be null")

Fields are plain pydantic fields. Every field should have a default so a blank
instance can be built for decoding; required-ness is checked by ``validate()``.
"""

from abc import abstractmethod
from typing import ClassVar, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from connect_messenger.errors import IdentifierSyntaxError, InvalidMessageError, RegistrationError
from connect_messenger.identifiers import validate_identifier

_CACHE_ATTR = "__message_discriminator__"


def normalize_type_name(name: Optional[str]) -> Optional[str]:
    return name.strip().lower() if name is not None else None


class Message(BaseModel):
    """Base for everything the messenger can put on the wire."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    message_type: ClassVar[Optional[str]] = None

    @classmethod
    def discriminator(cls) -> str:
        """Return the normalized wire type of this class.

        Computed on first use and cached on the class. The declaration must be
        made on the class itself; it is not inherited by subclasses.
        """
        cached = cls.__dict__.get(_CACHE_ATTR)
        if cached is not None:
            return cached

        declared = cls.__dict__.get("message_type")
        if not isinstance(declared, str):
            raise RegistrationError(
                f"The Message class '{cls.__qualname__}' must declare a message_type",
                code="missing_message_type",
            )
        type_name = normalize_type_name(declared)
        try:
            validate_identifier(type_name)
        except IdentifierSyntaxError as e:
            raise RegistrationError(
                f"The message_type of '{cls.__qualname__}' is invalid: {e}",
                code="invalid_message_type",
            ) from e

        # Concurrent first calls compute the same value; last write wins harmlessly.
        setattr(cls, _CACHE_ATTR, type_name)
        return type_name

    @property
    def type(self) -> str:
        return self.discriminator()

    def invalid(self, reason: str) -> InvalidMessageError:
        try:
            type_name = self.discriminator()
        except RegistrationError:
            type_name = self.__class__.__name__
        return InvalidMessageError(reason, type_name)

    @abstractmethod
    def validate(self) -> None:
        """Raise InvalidMessageError if this message is not fit to be sent."""


class IdentifiableMessage(Message):
    """A message about a specific subject, identified by a UUID."""

    subject_id: Optional[UUID] = None

    def validate(self) -> None:
        if self.subject_id is None:
            raise self.invalid("subject_id cannot be null")
