import uuid

import pytest

from connect_messenger import CommandMessage, Messenger

SUBJECT_ID = uuid.UUID("780e33be-1d57-4f15-9b8e-370e82c2378b")


@pytest.fixture
def subject_id() -> uuid.UUID:
    return SUBJECT_ID


@pytest.fixture
def messenger() -> Messenger:
    """Default messenger (status + heartbeat) plus command messages."""
    return Messenger.builder().register(CommandMessage).build()
