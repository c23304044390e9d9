"""
connect-messenger: polymorphic JSON message codec.

Serialize heterogeneous, typed messages to a JSON envelope and get the right
concrete class back on the other side, keyed by an embedded ``type`` field.
"""

from connect_messenger.messenger import Messenger, MessengerBuilder
from connect_messenger.registry import MessageRegistry, TypeDescriptor
from connect_messenger.config import MessengerConfig, load_config
from connect_messenger.identifiers import validate_identifier, is_valid_identifier, parse_id
from connect_messenger.errors import (
    MessengerError,
    InvalidMessageError,
    IdentifierSyntaxError,
    SyntaxErrorKind,
    ValidationError,
    RegistrationError,
    ConflictError,
    MessageParseError,
)
from connect_messenger.models import (
    Message,
    IdentifiableMessage,
    EnumCase,
    wire_enum,
    Status,
    StatusMessage,
    HeartbeatMessage,
    Command,
    CommandMessage,
)

__version__ = "0.1.0"
__all__ = [
    "Messenger",
    "MessengerBuilder",
    "MessageRegistry",
    "TypeDescriptor",
    "MessengerConfig",
    "load_config",
    "validate_identifier",
    "is_valid_identifier",
    "parse_id",
    "MessengerError",
    "InvalidMessageError",
    "IdentifierSyntaxError",
    "SyntaxErrorKind",
    "ValidationError",
    "RegistrationError",
    "ConflictError",
    "MessageParseError",
    "Message",
    "IdentifiableMessage",
    "EnumCase",
    "wire_enum",
    "Status",
    "StatusMessage",
    "HeartbeatMessage",
    "Command",
    "CommandMessage",
]
