"""
Status message: reports whether the identified subject is online.
"""

from enum import Enum
from typing import ClassVar

from connect_messenger.models.fields import EnumCase, wire_enum
from connect_messenger.models.message import IdentifiableMessage


class Status(Enum):
    ONLINE = "online"
    OFFLINE = "offline"


# Peers have always exchanged status names in lowercase.
WireStatus = wire_enum(Status, EnumCase.LOWER)


class StatusMessage(IdentifiableMessage):
    message_type: ClassVar[str] = "status"

    status: WireStatus = None

    def validate(self) -> None:
        super().validate()
        if self.status is None:
            raise self.invalid("status cannot be null")
