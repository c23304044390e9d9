"""Type descriptor registry and zero-value factory discovery."""

import uuid
from typing import Annotated, ClassVar, Optional

import pytest
from pydantic import Field

from connect_messenger import (
    ConflictError,
    HeartbeatMessage,
    IdentifiableMessage,
    Message,
    MessageParseError,
    MessageRegistry,
    RegistrationError,
    StatusMessage,
)
from connect_messenger.registry import find_zero_factory, zero_value


class OtherStatusMessage(Message):
    message_type: ClassVar[str] = "STATUS"

    def validate(self) -> None:
        pass


class NamedMessage(Message):
    message_type: ClassVar[str] = "named"

    name: str
    count: int = 5

    def validate(self) -> None:
        if not self.name:
            raise self.invalid("name cannot be empty")


class PositiveMessage(Message):
    message_type: ClassVar[str] = "positive"

    count: int = Field(gt=0)

    def validate(self) -> None:
        pass


class PingMessage(Message):
    message_type: ClassVar[str] = "ping"

    payload: Optional[str] = None

    def validate(self) -> None:
        pass


class UnfinishedMessage(Message):
    message_type: ClassVar[str] = "unfinished"


class BadTypeMessage(Message):
    message_type: ClassVar[str] = "no"

    def validate(self) -> None:
        pass


class KindMessage(Message):
    message_type: ClassVar[str] = "kind"

    kind: Optional[str] = Field(default=None, alias="type")

    def validate(self) -> None:
        pass


@pytest.fixture
def registry() -> MessageRegistry:
    return MessageRegistry()


class TestRegister:
    def test_register_returns_descriptor(self, registry):
        descriptor = registry.register(StatusMessage)
        assert descriptor.type_name == "status"
        assert descriptor.message_class is StatusMessage
        blank = descriptor.blank()
        assert isinstance(blank, StatusMessage)
        assert blank.subject_id is None and blank.status is None

    def test_same_type_twice_is_noop(self, registry):
        first = registry.register(StatusMessage)
        second = registry.register(StatusMessage)
        assert first is second
        assert len(registry) == 1

    def test_conflicting_type(self, registry):
        registry.register(StatusMessage)
        with pytest.raises(ConflictError) as exc_info:
            registry.register(OtherStatusMessage)
        assert exc_info.value.code == "type_conflict"
        assert registry.resolve("status").message_class is StatusMessage

    @pytest.mark.parametrize("candidate", [dict, Message, "status", StatusMessage(), None])
    def test_not_a_message(self, registry, candidate):
        with pytest.raises(RegistrationError) as exc_info:
            registry.register(candidate)
        assert exc_info.value.code == "not_a_message"

    def test_missing_declaration(self, registry):
        with pytest.raises(RegistrationError) as exc_info:
            registry.register(IdentifiableMessage)
        assert exc_info.value.code == "missing_message_type"

    def test_invalid_declaration(self, registry):
        with pytest.raises(RegistrationError) as exc_info:
            registry.register(BadTypeMessage)
        assert exc_info.value.code == "invalid_message_type"

    def test_type_field_is_reserved(self, registry):
        with pytest.raises(RegistrationError) as exc_info:
            registry.register(KindMessage)
        assert exc_info.value.code == "reserved_field"
        assert "kind" not in registry

    def test_abstract_message_is_not_constructable(self, registry):
        with pytest.raises(RegistrationError) as exc_info:
            registry.register(UnfinishedMessage)
        assert exc_info.value.code == "not_constructable"

    def test_explicit_factory(self, registry):
        descriptor = registry.register(PingMessage, factory=lambda: PingMessage(payload="blank"))
        assert descriptor.blank().payload == "blank"

    def test_explicit_factory_replaces_discovered(self, registry):
        registry.register(PingMessage)
        descriptor = registry.register(PingMessage, factory=lambda: PingMessage(payload="x"))
        assert registry.resolve("ping") is descriptor

    def test_factory_must_build_the_registered_class(self, registry):
        with pytest.raises(RegistrationError) as exc_info:
            registry.register(PingMessage, factory=lambda: HeartbeatMessage())
        assert exc_info.value.code == "not_constructable"

    def test_failing_factory(self, registry):
        def explode():
            raise RuntimeError("boom")

        with pytest.raises(RegistrationError, match="boom"):
            registry.register(PingMessage, factory=explode)


class TestFreeze:
    def test_register_after_freeze(self, registry):
        registry.register(StatusMessage)
        registry.freeze()
        assert registry.frozen
        with pytest.raises(RegistrationError) as exc_info:
            registry.register(HeartbeatMessage)
        assert exc_info.value.code == "registry_frozen"
        assert registry.resolve("status").message_class is StatusMessage

    def test_freeze_twice(self, registry):
        registry.freeze()
        registry.freeze()
        assert len(registry) == 0


class TestResolve:
    def test_normalizes(self, registry):
        registry.register(StatusMessage)
        assert registry.resolve("  STATUS ").message_class is StatusMessage
        assert "Status" in registry
        assert "bogus" not in registry
        assert None not in registry

    def test_missing(self, registry):
        with pytest.raises(MessageParseError) as exc_info:
            registry.resolve(None)
        assert exc_info.value.code == "missing_type"

    def test_unknown(self, registry):
        with pytest.raises(MessageParseError) as exc_info:
            registry.resolve("bogus")
        assert exc_info.value.code == "unknown_type"
        assert "unknown type 'bogus'" in str(exc_info.value)

    def test_types_and_iteration(self, registry):
        registry.register(StatusMessage)
        registry.register(HeartbeatMessage)
        assert registry.types() == {"status": StatusMessage, "heartbeat": HeartbeatMessage}
        assert {d.type_name for d in registry} == {"status", "heartbeat"}


class TestZeroFactory:
    def test_required_fields_get_zero_values(self):
        factory = find_zero_factory(NamedMessage)
        blank = factory()
        assert blank.name == ""
        assert blank.count == 5

    def test_no_candidate_succeeds(self):
        with pytest.raises(RegistrationError) as exc_info:
            find_zero_factory(PositiveMessage)
        assert exc_info.value.code == "not_constructable"
        assert exc_info.value.__cause__ is not None

    def test_prefers_no_arguments(self):
        assert find_zero_factory(PingMessage)().payload is None

    @pytest.mark.parametrize(
        "annotation, expected",
        [
            (int, 0),
            (float, 0.0),
            (str, ""),
            (bool, False),
            (Optional[int], None),
            (int | None, None),
            (list[int], []),
            (dict, {}),
            (Annotated[str, "meta"], ""),
            (uuid.UUID, None),
        ],
    )
    def test_zero_value(self, annotation, expected):
        assert zero_value(annotation) == expected
