"""
Handles speech recognition and synthesis callbacks from the browser.

These handlers never change the session state; they turn each callback into
a coordinator event.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from voice_call.call.events import (
    RecognitionEnded,
    RecognitionFailed,
    SynthesisFailed,
    SynthesisFinished,
    UtteranceRecognized,
)
from voice_call.call.session import SessionController
from voice_call.config.constants import LOGGER_NAME
from voice_call.models.message_schemas import (
    RecognitionEndMessage,
    RecognitionErrorMessage,
    RecognitionResultMessage,
    SynthesisEndMessage,
    SynthesisErrorMessage,
    VoicesChangedMessage,
)

logger = logging.getLogger(LOGGER_NAME)


async def handle_recognition_result(
    message: Dict[str, Any], controller: SessionController
) -> None:
    """Forward a final recognition result to the coordinator."""
    try:
        result = RecognitionResultMessage(**message)
    except ValidationError as e:
        logger.error(f"Invalid recognition.result message: {e}")
        return
    controller.coordinator.submit(UtteranceRecognized(text=result.transcript))


async def handle_recognition_end(
    message: Dict[str, Any], controller: SessionController
) -> None:
    try:
        RecognitionEndMessage(**message)
    except ValidationError as e:
        logger.error(f"Invalid recognition.end message: {e}")
        return
    logger.debug("Recognition ended")
    controller.coordinator.submit(RecognitionEnded())


async def handle_recognition_error(
    message: Dict[str, Any], controller: SessionController
) -> None:
    """
    Forward a recognition error to the coordinator.

    The coordinator decides from the error code whether to retry (no-speech,
    start failures, transient errors) or to report and stop (permission
    errors).
    """
    try:
        error = RecognitionErrorMessage(**message)
    except ValidationError as e:
        logger.error(f"Invalid recognition.error message: {e}")
        return
    if error.message:
        logger.debug(f"Recognition error detail: {error.message}")
    controller.coordinator.submit(RecognitionFailed(error=error.error))


async def handle_synthesis_end(
    message: Dict[str, Any], controller: SessionController
) -> None:
    try:
        SynthesisEndMessage(**message)
    except ValidationError as e:
        logger.error(f"Invalid synthesis.end message: {e}")
        return
    controller.coordinator.submit(SynthesisFinished())


async def handle_synthesis_error(
    message: Dict[str, Any], controller: SessionController
) -> None:
    try:
        error = SynthesisErrorMessage(**message)
    except ValidationError as e:
        logger.error(f"Invalid synthesis.error message: {e}")
        return
    controller.coordinator.submit(SynthesisFailed(error=error.error))


async def handle_voices_changed(
    message: Dict[str, Any], controller: SessionController
) -> None:
    """Select the preferred synthesis voice from the browser's voice list."""
    try:
        voices = VoicesChangedMessage(**message)
    except ValidationError as e:
        logger.error(f"Invalid voices.changed message: {e}")
        return
    logger.info(f"Browser reported {len(voices.voices)} voices")
    controller.output.update_voices(voices.voices)
