"""
WebSocket connection manager for the browser call client.

This module implements the server side of the browser channel, providing the
infrastructure to:
- Accept and manage WebSocket connections, one call session per connection
- Route incoming browser events to the appropriate handler functions
- Push status updates, the recording location and the call results back

The WebSocketManager class is the central component that ties a connected
browser to its SessionController.
"""

import json
import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import WebSocket, WebSocketDisconnect

from voice_call.call.session import CallReport, SessionController
from voice_call.config import constants
from voice_call.config.constants import LOGGER_NAME
from voice_call.config.settings import CallTimings
from voice_call.handlers.call_handlers import handle_call_end, handle_call_start
from voice_call.handlers.recording_handlers import (
    handle_recording_chunk,
    handle_recording_error,
    handle_recording_started,
    handle_recording_stopped,
)
from voice_call.handlers.speech_handlers import (
    handle_recognition_end,
    handle_recognition_error,
    handle_recognition_result,
    handle_synthesis_end,
    handle_synthesis_error,
    handle_voices_changed,
)
from voice_call.models.message_schemas import (
    CallEndedMessage,
    RecordingReadyMessage,
    StatusMessage,
)
from voice_call.models.session_registry import SessionRegistry
from voice_call.models.session_state import SessionState
from voice_call.services.backend_client import BackendClient
from voice_call.services.client_channel import ClientChannel

logger = logging.getLogger(LOGGER_NAME)

# Type hint for handler functions
HandlerFunc = Callable[[Dict[str, Any], SessionController], Awaitable[None]]


def recording_url(session_id: str) -> str:
    return f"/recordings/{session_id}"


class WebSocketManager:
    """Manages browser WebSocket connections and routes their messages to handlers.

    Each message type is routed to a specific handler function based on the
    message's "type" field. Recorded audio chunks take a fast path since they
    are by far the most frequent message.
    """

    def __init__(self, backend: BackendClient, timings: Optional[CallTimings] = None):
        self.backend = backend
        self.timings = timings or CallTimings()
        self.session_registry = SessionRegistry()

        self.handlers: Dict[str, HandlerFunc] = {
            constants.MESSAGE_TYPE_CALL_START: handle_call_start,
            constants.MESSAGE_TYPE_CALL_END: handle_call_end,
            constants.MESSAGE_TYPE_RECOGNITION_RESULT: handle_recognition_result,
            constants.MESSAGE_TYPE_RECOGNITION_END: handle_recognition_end,
            constants.MESSAGE_TYPE_RECOGNITION_ERROR: handle_recognition_error,
            constants.MESSAGE_TYPE_SYNTHESIS_END: handle_synthesis_end,
            constants.MESSAGE_TYPE_SYNTHESIS_ERROR: handle_synthesis_error,
            constants.MESSAGE_TYPE_VOICES_CHANGED: handle_voices_changed,
            constants.MESSAGE_TYPE_RECORDING_STARTED: handle_recording_started,
            constants.MESSAGE_TYPE_RECORDING_CHUNK: handle_recording_chunk,
            constants.MESSAGE_TYPE_RECORDING_STOPPED: handle_recording_stopped,
            constants.MESSAGE_TYPE_RECORDING_ERROR: handle_recording_error,
        }

    def create_session(self, session_id: str, channel: ClientChannel) -> SessionController:
        """
        Build the controller for a new connection and wire its notifications.

        Args:
            session_id: Identifier of the connection
            channel: Outgoing channel to the browser

        Returns:
            The registered SessionController
        """

        async def send_status(state: SessionState) -> None:
            await channel.send(StatusMessage(**state.snapshot()))

        async def send_call_ended(report: CallReport) -> None:
            if report.artifact is not None:
                await channel.send(
                    RecordingReadyMessage(
                        url=recording_url(session_id),
                        filename=report.artifact.filename,
                        mimeType=report.artifact.mime_type,
                        size=report.artifact.size,
                    )
                )
            await channel.send(
                CallEndedMessage(
                    transcript=report.transcript,
                    summary=report.summary,
                    delivered=report.delivered,
                )
            )

        controller = SessionController(
            channel,
            self.backend,
            timings=self.timings,
            on_status=send_status,
            on_call_ended=send_call_ended,
        )
        self.session_registry.add_session(session_id, controller)
        return controller

    async def handle_websocket(self, websocket: WebSocket):
        """Handle a WebSocket connection throughout its lifecycle.

        Args:
            websocket (WebSocket): The FastAPI WebSocket connection object

        This method:
        1. Accepts the WebSocket connection and creates its call session
        2. Processes incoming messages in a loop
        3. Routes each message to the appropriate handler based on type
        4. Ends a running call and cleans up when the connection ends
        """
        await websocket.accept()
        session_id = str(uuid.uuid4())
        channel = ClientChannel(websocket)
        controller = self.create_session(session_id, channel)
        controller.coordinator.start()
        logger.info(f"WebSocket connection established for session: {session_id}")

        try:
            await controller.coordinator.report_status(controller.state.status)
            while True:
                data = await websocket.receive_text()
                try:
                    message_dict = json.loads(data)
                except json.JSONDecodeError as e:
                    logger.error(f"Received invalid JSON: {e}")
                    continue
                if not isinstance(message_dict, dict):
                    logger.error("Received a message that is not a JSON object")
                    continue

                message_type = message_dict.get("type")

                # Fast path for audio chunks to minimize processing overhead
                if message_type == constants.MESSAGE_TYPE_RECORDING_CHUNK:
                    await handle_recording_chunk(message_dict, controller)
                    continue

                logger.info(f"Received message type: {message_type} for session: {session_id}")

                handler = self.handlers.get(message_type)
                if handler is None:
                    logger.warning(f"Unhandled message type received: {message_type}")
                    continue
                await handler(message_dict, controller)

        except WebSocketDisconnect:
            logger.info(f"Client disconnected from session: {session_id}")
        except Exception as e:
            logger.error(f"Error in WebSocket connection: {e}", exc_info=True)
        finally:
            await controller.close()
            self.session_registry.remove_session(session_id)
            logger.info(f"Session removed during cleanup: {session_id}")
            try:
                await websocket.close()
            except RuntimeError:
                # Already closed by the client
                pass
            logger.info("WebSocket connection closed")
