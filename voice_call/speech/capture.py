"""
Speech recognition wrapper.
"""

import logging
from typing import Optional

from voice_call.config.constants import LOGGER_NAME
from voice_call.exceptions import CaptureStartError
from voice_call.models.message_schemas import (
    RecognitionStartCommand,
    RecognitionStopCommand,
)
from voice_call.services.client_channel import ClientChannel

logger = logging.getLogger(LOGGER_NAME)


class VoiceCapture:
    """
    Drives the browser's speech recognition.

    Like the platform recognizer it wraps, starting while a recognition run
    is already in progress fails with CaptureStartError.
    """

    def __init__(self, channel: ClientChannel, command: Optional[RecognitionStartCommand] = None):
        self.channel = channel
        self.command = command or RecognitionStartCommand()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """
        Start a recognition run.

        Raises:
            CaptureStartError: If recognition is already running
        """
        if self._running:
            raise CaptureStartError("Speech recognition is already running")
        await self.channel.send(self.command)
        self._running = True
        logger.debug("Recognition start requested")

    async def stop(self) -> None:
        """Stop the current recognition run, if any."""
        if not self._running:
            return
        self._running = False
        await self.channel.send(RecognitionStopCommand())
        logger.debug("Recognition stop requested")

    def mark_ended(self) -> None:
        """Record that the browser reported the run as over (end or error)."""
        self._running = False
