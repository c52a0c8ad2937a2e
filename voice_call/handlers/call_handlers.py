"""
Handles call control messages from the browser.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from voice_call.call.session import SessionController
from voice_call.config.constants import LOGGER_NAME
from voice_call.models.message_schemas import CallEndMessage, CallStartMessage

logger = logging.getLogger(LOGGER_NAME)


async def handle_call_start(message: Dict[str, Any], controller: SessionController) -> None:
    """
    Handle the call.start message sent when the user presses "Start Call".

    The call is started in the background: acquiring the recorder waits for
    the browser's acknowledgement, which arrives on this same connection.

    Args:
        message: The call.start message
        controller: Session controller of the connection
    """
    try:
        start = CallStartMessage(**message)
    except ValidationError as e:
        logger.error(f"Invalid call.start message: {e}")
        return

    logger.info("Call start requested")
    controller.request_start(recognition_supported=start.recognitionSupported)


async def handle_call_end(message: Dict[str, Any], controller: SessionController) -> None:
    """
    Handle the call.end message sent when the user presses "End Call".

    Args:
        message: The call.end message
        controller: Session controller of the connection
    """
    try:
        CallEndMessage(**message)
    except ValidationError as e:
        logger.error(f"Invalid call.end message: {e}")
        return

    logger.info("Call end requested by user")
    controller.request_end()
