"""
Command message: asks the receiver to apply a command to the identified subject.
"""

from enum import Enum
from typing import ClassVar

from connect_messenger.models.fields import EnumCase, wire_enum
from connect_messenger.models.message import IdentifiableMessage


class Command(Enum):
    ADD = "add"
    REMOVE = "remove"


WireCommand = wire_enum(Command, EnumCase.LOWER)


class CommandMessage(IdentifiableMessage):
    message_type: ClassVar[str] = "command"

    command: WireCommand = None

    def validate(self) -> None:
        super().validate()
        if self.command is None:
            raise self.invalid("command cannot be null")
