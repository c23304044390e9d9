from connect_messenger.models.message import Message, IdentifiableMessage, normalize_type_name
from connect_messenger.models.fields import EnumCase, wire_enum
from connect_messenger.models.status import Status, StatusMessage
from connect_messenger.models.heartbeat import HeartbeatMessage
from connect_messenger.models.command import Command, CommandMessage

__all__ = [
    "Message",
    "IdentifiableMessage",
    "normalize_type_name",
    "EnumCase",
    "wire_enum",
    "Status",
    "StatusMessage",
    "HeartbeatMessage",
    "Command",
    "CommandMessage",
]
