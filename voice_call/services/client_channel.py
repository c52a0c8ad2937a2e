"""
Outgoing side of the browser WebSocket.

Every component that drives the browser (speech capture, speech output,
recorder, status updates) sends its commands through a ClientChannel, which
serializes the pydantic command models and refuses to send once the
connection is gone.
"""

import logging

from fastapi import WebSocket

from voice_call.config.constants import LOGGER_NAME
from voice_call.exceptions import ChannelClosedError
from voice_call.models.message_schemas import OutgoingMessage

logger = logging.getLogger(LOGGER_NAME)


class ClientChannel:
    """Sends command and status messages to a connected browser."""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, message: OutgoingMessage) -> None:
        """
        Serialize and send a message to the browser.

        Args:
            message: Any outgoing message model

        Raises:
            ChannelClosedError: If the channel was closed or sending failed
        """
        if self._closed:
            raise ChannelClosedError(f"Cannot send {message.type}: channel closed")
        try:
            await self.websocket.send_text(message.model_dump_json())
        except Exception as e:
            self._closed = True
            raise ChannelClosedError(f"Failed to send {message.type}: {e}") from e
        logger.debug(f"Sent {message.type}")

    def close(self) -> None:
        self._closed = True
