"""
Heartbeat message: free-form keepalive payload.
"""

from typing import ClassVar, Optional

from connect_messenger.models.message import Message


class HeartbeatMessage(Message):
    message_type: ClassVar[str] = "heartbeat"

    payload: Optional[str] = None

    def validate(self) -> None:
        if self.payload is None:
            raise self.invalid("heartbeat payload cannot be null")
