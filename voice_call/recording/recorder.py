"""
Call recording lifecycle.

Acquisition and finalization are request/acknowledge exchanges with the
browser: ``recording.start`` is answered by ``recording.started`` or
``recording.error``, and ``recording.stop`` by ``recording.stopped`` once the
browser has flushed its last chunk. Both waits are bounded by a timeout.
"""

import asyncio
import logging
from typing import List, Optional

from voice_call.config.constants import (
    LOGGER_NAME,
    RECORDING_ACK_TIMEOUT,
    RECORDING_FILENAME,
    RECORDING_MIME_TYPE,
)
from voice_call.exceptions import CapturePermissionError, ChannelClosedError
from voice_call.models.artifact import AudioArtifact
from voice_call.models.message_schemas import (
    RecordingStartCommand,
    RecordingStopCommand,
)
from voice_call.services.client_channel import ClientChannel

logger = logging.getLogger(LOGGER_NAME)


class AudioRecorder:
    """
    Buffers the call recording and produces the final artifact.

    The recorder is reusable: reset() drops the chunks and the artifact of
    the previous call.
    """

    def __init__(self, channel: ClientChannel, ack_timeout: float = RECORDING_ACK_TIMEOUT):
        self.channel = channel
        self.ack_timeout = ack_timeout
        self._chunks: List[bytes] = []
        self._recording = False
        self._started: Optional[asyncio.Future] = None
        self._stopped: Optional[asyncio.Future] = None
        self._mime_type = RECORDING_MIME_TYPE
        self.artifact: Optional[AudioArtifact] = None

    @property
    def is_recording(self) -> bool:
        return self._recording

    @property
    def buffered_bytes(self) -> int:
        return sum(len(chunk) for chunk in self._chunks)

    def reset(self) -> None:
        """Drop buffered chunks and the previous artifact."""
        self._chunks = []
        self._recording = False
        self._started = None
        self._stopped = None
        self._mime_type = RECORDING_MIME_TYPE
        self.artifact = None

    async def start(self) -> None:
        """
        Acquire the browser recorder and begin buffering.

        Raises:
            CapturePermissionError: If the browser reports an error or does not
                acknowledge in time
            ChannelClosedError: If the browser is no longer connected
        """
        self.reset()
        loop = asyncio.get_running_loop()
        self._started = loop.create_future()
        try:
            await self.channel.send(RecordingStartCommand())
            await asyncio.wait_for(self._started, timeout=self.ack_timeout)
        except asyncio.TimeoutError:
            raise CapturePermissionError("recorder did not start")
        finally:
            self._started = None
        self._recording = True
        logger.info("Recording started")

    def mark_started(self) -> None:
        if self._started is not None and not self._started.done():
            self._started.set_result(True)
        else:
            logger.warning("Unexpected recording.started message")

    def mark_failed(self, reason: str) -> None:
        """Fail a pending start with the reason reported by the browser."""
        if self._started is not None and not self._started.done():
            self._started.set_exception(CapturePermissionError(reason))
        else:
            logger.error(f"Recorder error outside of start: {reason}")

    def add_chunk(self, data: bytes) -> None:
        if not self._recording and self._stopped is None:
            logger.warning("Dropping recording chunk received while not recording")
            return
        if data:
            self._chunks.append(data)

    def mark_stopped(self, mime_type: Optional[str] = None) -> None:
        if mime_type:
            self._mime_type = mime_type
        if self._stopped is not None and not self._stopped.done():
            self._stopped.set_result(True)

    async def stop(self) -> Optional[AudioArtifact]:
        """
        Stop recording and join the buffered chunks into one artifact.

        Waits for the browser to confirm the final flush. If it does not
        confirm in time the artifact is built from what has arrived.

        Returns:
            The artifact, or None if the recorder was never started
        """
        if not self._recording:
            return None
        self._recording = False
        loop = asyncio.get_running_loop()
        self._stopped = loop.create_future()
        try:
            await self.channel.send(RecordingStopCommand())
            await asyncio.wait_for(self._stopped, timeout=self.ack_timeout)
        except asyncio.TimeoutError:
            logger.warning("Recorder did not confirm stop, using buffered chunks")
        except ChannelClosedError as e:
            logger.warning(f"Recorder unreachable ({e}), using buffered chunks")
        finally:
            self._stopped = None

        self.artifact = AudioArtifact(
            data=b"".join(self._chunks),
            mime_type=self._mime_type,
            filename=RECORDING_FILENAME,
        )
        logger.info(f"Recording finalized: {self.artifact.size} bytes")
        return self.artifact
