"""
Handles recorder acknowledgements and recorded audio from the browser.
"""

import base64
import logging
from typing import Any, Dict

from pydantic import ValidationError

from voice_call.call.session import SessionController
from voice_call.config.constants import LOGGER_NAME
from voice_call.models.message_schemas import (
    RecordingChunkMessage,
    RecordingErrorMessage,
    RecordingStartedMessage,
    RecordingStoppedMessage,
)

logger = logging.getLogger(LOGGER_NAME)


async def handle_recording_started(
    message: Dict[str, Any], controller: SessionController
) -> None:
    try:
        RecordingStartedMessage(**message)
    except ValidationError as e:
        logger.error(f"Invalid recording.started message: {e}")
        return
    controller.recorder.mark_started()


async def handle_recording_chunk(
    message: Dict[str, Any], controller: SessionController
) -> None:
    """
    Buffer a recorded audio chunk.

    Args:
        message: The recording.chunk message with base64 audio
        controller: Session controller of the connection
    """
    try:
        chunk = RecordingChunkMessage(**message)
    except ValidationError as e:
        logger.error(f"Invalid recording.chunk message: {e}")
        return
    controller.recorder.add_chunk(base64.b64decode(chunk.audioChunk))


async def handle_recording_stopped(
    message: Dict[str, Any], controller: SessionController
) -> None:
    try:
        stopped = RecordingStoppedMessage(**message)
    except ValidationError as e:
        logger.error(f"Invalid recording.stopped message: {e}")
        return
    controller.recorder.mark_stopped(stopped.mimeType)


async def handle_recording_error(
    message: Dict[str, Any], controller: SessionController
) -> None:
    """Fail a pending recorder start with the browser's reason."""
    try:
        error = RecordingErrorMessage(**message)
    except ValidationError as e:
        logger.error(f"Invalid recording.error message: {e}")
        return
    logger.error(f"Recorder error reported by browser: {error.error}")
    controller.recorder.mark_failed(error.error)
