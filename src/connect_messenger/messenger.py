"""
Messenger: JSON envelope codec for polymorphic messages.

Wire format::

    {"type":"status","subject_id":"780e33be-...","status":"online"}
    [{"type":"status",...},{"type":"heartbeat","payload":"ping"}]

``encode`` always writes an array. ``decode`` accepts a single object or a
non-empty array and picks the concrete class of each entry from its ``type``.
"""

import importlib
import json
import logging
from typing import Any, Iterable, Optional, Union

import pydantic

from connect_messenger.config import MessengerConfig
from connect_messenger.errors import InvalidMessageError, MessageParseError, RegistrationError, ValidationError
from connect_messenger.models.heartbeat import HeartbeatMessage
from connect_messenger.models.message import Message
from connect_messenger.models.status import StatusMessage
from connect_messenger.registry import MessageFactory, MessageRegistry, TypeDescriptor, check_reserved_fields

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_TYPES: tuple[type[Message], ...] = (StatusMessage, HeartbeatMessage)


class Messenger:
    """Thread safe once built: the registry is frozen and never written again."""

    def __init__(self, registry: MessageRegistry, indent: Optional[int] = None):
        registry.freeze()
        self._registry = registry
        self._indent = indent

    @staticmethod
    def builder(include_defaults: bool = True) -> "MessengerBuilder":
        return MessengerBuilder(include_defaults=include_defaults)

    @property
    def registry(self) -> MessageRegistry:
        return self._registry

    def encode(self, messages: Union[Message, Iterable[Message]]) -> str:
        """Validate every message, then serialize them as a JSON array.

        If any message is invalid a ValidationError listing all failures is
        raised and nothing is returned.
        """
        if isinstance(messages, Message):
            messages = [messages]
        messages = list(messages)

        failures: list[tuple[int, InvalidMessageError]] = []
        for index, message in enumerate(messages):
            if not isinstance(message, Message):
                raise TypeError(f"Expected a Message at index {index}, got {type(message).__name__}")
            try:
                message.validate()
            except InvalidMessageError as e:
                failures.append((index, e))
        if failures:
            raise ValidationError(failures)

        return self._dumps([self.to_wire(m) for m in messages])

    def encode_one(self, message: Message) -> str:
        return self.encode([message])

    def to_wire(self, message: Message) -> dict[str, Any]:
        """Return the JSON-ready dict for one message, without validating it."""
        check_reserved_fields(type(message))
        return {"type": message.type, **message.model_dump(mode="json", by_alias=True)}

    def decode(self, text: Union[str, bytes]) -> list[Message]:
        """Parse one message object or an array of them.

        Decoded messages are not validated; call ``validate()`` before trusting them.
        """
        if isinstance(text, (bytes, bytearray)):
            try:
                text = bytes(text).decode("utf-8")
            except UnicodeDecodeError as e:
                raise MessageParseError(f"Message is not valid UTF-8: {e}", code="malformed_json") from e

        text = text.strip()
        try:
            data = json.loads(text)
        except (ValueError, RecursionError) as e:
            # JSONDecodeError, oversized int literals and runaway nesting
            logger.debug("Rejected malformed message json: %s", e)
            raise MessageParseError(f"Malformed JSON: {e}", code="malformed_json") from e

        if text.startswith("[") and text.endswith("]"):
            if not data:
                raise MessageParseError("Empty json array with no message to parse", code="empty_batch")
            return [self._from_wire(entry, index) for index, entry in enumerate(data)]
        return [self._from_wire(data)]

    def _from_wire(self, entry: Any, index: Optional[int] = None) -> Message:
        where = f" at index {index}" if index is not None else ""
        if not isinstance(entry, dict):
            raise MessageParseError(f"Expected a json object{where}, got {type(entry).__name__}", code="not_an_object")

        type_name = entry.get("type")
        if type_name is not None and not isinstance(type_name, str):
            raise MessageParseError(f"The 'type' property{where} must be a string", code="unknown_type")
        try:
            descriptor = self._registry.resolve(type_name)
        except MessageParseError as e:
            logger.debug("Rejected message%s: %s (%s)", where, e, e.code)
            raise

        return _populate(descriptor, entry, where)

    def _dumps(self, data: Any) -> str:
        if self._indent is None:
            return json.dumps(data, separators=(",", ":"), ensure_ascii=False)
        return json.dumps(data, indent=self._indent, ensure_ascii=False)


def _populate(descriptor: TypeDescriptor, entry: dict[str, Any], where: str = "") -> Message:
    # Fields absent from the wire keep the blank instance's values.
    values = descriptor.blank().model_dump(by_alias=True)
    values.update((k, v) for k, v in entry.items() if k != "type")
    try:
        return descriptor.message_class.model_validate(values)
    except pydantic.ValidationError as e:
        raise MessageParseError(
            f"Invalid '{descriptor.type_name}' message{where}: {e.error_count()} field error(s)",
            code="invalid_message_data",
            details={"type": descriptor.type_name, "errors": e.errors(include_url=False, include_context=False, include_input=False)},
        ) from e


class MessengerBuilder:
    """Collects message types, then builds an immutable :class:`Messenger`.

    Status and heartbeat messages are registered by default.
    """

    def __init__(self, include_defaults: bool = True):
        self._registry = MessageRegistry()
        self._indent: Optional[int] = None
        if include_defaults:
            for message_class in DEFAULT_MESSAGE_TYPES:
                self.register(message_class)

    @classmethod
    def from_config(cls, config: MessengerConfig) -> "MessengerBuilder":
        builder = cls(include_defaults=config.include_defaults)
        for path in config.message_types:
            builder.register_path(path)
        builder.indent(config.indent)
        return builder

    def register(self, message_class: type[Message], factory: Optional[MessageFactory] = None) -> "MessengerBuilder":
        self._registry.register(message_class, factory)
        return self

    def register_path(self, path: str) -> "MessengerBuilder":
        """Register a message class given as ``"package.module:ClassName"``."""
        return self.register(import_message_class(path))

    def indent(self, indent: Optional[int]) -> "MessengerBuilder":
        self._indent = indent
        return self

    def build(self) -> Messenger:
        return Messenger(self._registry, indent=self._indent)


def import_message_class(path: str) -> type[Message]:
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise RegistrationError(f"Message type path must look like 'module:ClassName', got {path!r}", code="import_error")
    try:
        return getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as e:
        raise RegistrationError(f"Cannot import message type {path!r}: {e}", code="import_error") from e
