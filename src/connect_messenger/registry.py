"""
Message type registry: wire discriminator -> concrete Message class.

Registration happens once while a Messenger is being built. ``freeze()`` then
swaps the table for a read-only view, after which lookups from any number of
threads need no locking.
"""

import functools
import inspect
import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType, UnionType
from typing import Annotated, Any, Callable, Iterator, Mapping, Optional, Union, get_args, get_origin

from connect_messenger.errors import ConflictError, MessageParseError, RegistrationError
from connect_messenger.models.message import Message, normalize_type_name

logger = logging.getLogger(__name__)

MessageFactory = Callable[[], Message]

_ZERO_VALUES: dict[Any, Any] = {int: 0, float: 0.0, str: "", bool: False, bytes: b""}
_ZERO_CONTAINERS = (list, dict, set, frozenset, tuple)


@dataclass(frozen=True)
class TypeDescriptor:
    type_name: str
    message_class: type[Message]
    factory: MessageFactory

    def blank(self) -> Message:
        return self.factory()


def zero_value(annotation: Any) -> Any:
    """Return the "empty" value for a field annotation: 0, "", False, an empty container or None."""
    origin = get_origin(annotation)
    if origin is Annotated:
        return zero_value(get_args(annotation)[0])
    if origin is Union or origin is UnionType:
        return None
    if origin in _ZERO_CONTAINERS:
        return origin()
    if annotation in _ZERO_CONTAINERS:
        return annotation()
    return _ZERO_VALUES.get(annotation)


def find_zero_factory(message_class: type[Message]) -> MessageFactory:
    """Find the cheapest way to build a blank instance of ``message_class``.

    Candidates are tried from fewest to most arguments: no arguments, then
    zero values for the required parameters only, then zero values for every
    parameter. The first candidate that constructs without error wins.
    """
    params = [
        p for p in inspect.signature(message_class).parameters.values()
        if p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD)
    ]
    required = [p for p in params if p.default is p.empty]

    candidates: list[dict[str, Any]] = [{}]
    if required:
        candidates.append({p.name: zero_value(p.annotation) for p in required})
    if len(params) > len(required):
        candidates.append({p.name: zero_value(p.annotation) for p in params})

    error: Optional[Exception] = None
    for kwargs in candidates:
        try:
            message_class(**kwargs)
        except Exception as e:
            error = e
            continue
        return functools.partial(message_class, **kwargs)

    raise RegistrationError(
        f"Message type {message_class.__qualname__} must be constructable with empty values",
        code="not_constructable",
    ) from error


def check_reserved_fields(message_class: type[Message]) -> None:
    """The wire ``type`` key belongs to the discriminator, never to a field."""
    fields = message_class.model_fields
    if "type" in fields or any(f.alias == "type" or f.serialization_alias == "type" for f in fields.values()):
        raise RegistrationError(
            f"{message_class.__qualname__} declares a 'type' field, which is reserved for the discriminator",
            code="reserved_field",
        )


class MessageRegistry:
    def __init__(self) -> None:
        self._types: Mapping[str, TypeDescriptor] = {}
        self._lock = threading.Lock()
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, message_class: type[Message], factory: Optional[MessageFactory] = None) -> TypeDescriptor:
        """Bind ``message_class`` under its discriminator.

        Registering the same class twice is a no-op; binding a discriminator that
        already belongs to another class raises ConflictError. Without an explicit
        ``factory`` one is discovered with :func:`find_zero_factory`.
        """
        if self._frozen:
            raise RegistrationError("Cannot register message types after the messenger is built", code="registry_frozen")
        if not isinstance(message_class, type) or message_class is Message or not issubclass(message_class, Message):
            raise RegistrationError(f"{message_class!r} must be a subclass of Message", code="not_a_message")

        type_name = message_class.discriminator()
        check_reserved_fields(message_class)

        with self._lock:
            existing = self._types.get(type_name)
            if existing is not None and existing.message_class is not message_class:
                raise ConflictError(type_name, existing.message_class, message_class)
            if existing is not None and factory is None:
                return existing

            if factory is None:
                factory = find_zero_factory(message_class)
            else:
                _check_factory(message_class, factory)

            descriptor = TypeDescriptor(type_name, message_class, factory)
            self._types[type_name] = descriptor  # type: ignore[index]

        logger.debug("Registered message type %r -> %s", type_name, message_class.__qualname__)
        return descriptor

    def freeze(self) -> None:
        with self._lock:
            if not self._frozen:
                self._types = MappingProxyType(dict(self._types))
                self._frozen = True

    def resolve(self, type_name: Optional[str]) -> TypeDescriptor:
        if type_name is None:
            raise MessageParseError("Missing 'type' property", code="missing_type")
        descriptor = self._types.get(normalize_type_name(type_name))
        if descriptor is None:
            raise MessageParseError(
                f"Cannot deserialize json Message of unknown type '{type_name}'",
                code="unknown_type",
                details={"type": type_name},
            )
        return descriptor

    def types(self) -> dict[str, type[Message]]:
        return {name: d.message_class for name, d in self._types.items()}

    def __contains__(self, type_name: object) -> bool:
        return isinstance(type_name, str) and normalize_type_name(type_name) in self._types

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)


def _check_factory(message_class: type[Message], factory: MessageFactory) -> None:
    try:
        blank = factory()
    except Exception as e:
        raise RegistrationError(
            f"Factory for {message_class.__qualname__} failed: {e}", code="not_constructable"
        ) from e
    if type(blank) is not message_class:
        raise RegistrationError(
            f"Factory for {message_class.__qualname__} returned {type(blank).__qualname__}",
            code="not_constructable",
        )
