"""
Call session lifecycle.

The SessionController owns everything that lives for exactly one call: the
conversation log, the recording and the turn coordinator's active flag. It
starts a call (microphone, greeting), ends it (recording, transcript,
summary) and delivers the results to the email endpoint.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel

from voice_call.call.coordinator import TurnCoordinator
from voice_call.call.events import GreetingReceived
from voice_call.config import constants
from voice_call.config.constants import LOGGER_NAME
from voice_call.config.settings import CallTimings
from voice_call.exceptions import (
    BackendError,
    CapturePermissionError,
    ChannelClosedError,
)
from voice_call.models.artifact import AudioArtifact
from voice_call.models.conversation import ConversationLog, Message, MessageRole
from voice_call.models.session_state import SessionState
from voice_call.recording.recorder import AudioRecorder
from voice_call.services.backend_client import BackendClient
from voice_call.services.client_channel import ClientChannel
from voice_call.speech.capture import VoiceCapture
from voice_call.speech.output import VoiceOutput

logger = logging.getLogger(LOGGER_NAME)


class CallReport(BaseModel):
    """Outcome of an ended call."""

    transcript: str
    summary: str
    artifact: Optional[AudioArtifact] = None
    delivered: bool = False


class SessionController:
    """
    Starts and ends calls for one connected browser.

    Only one call runs at a time. Starting a new call discards the log and
    the recording of the previous one.
    """

    def __init__(
        self,
        channel: ClientChannel,
        backend: BackendClient,
        timings: Optional[CallTimings] = None,
        on_status: Optional[Callable[[SessionState], Awaitable[None]]] = None,
        on_call_ended: Optional[Callable[[CallReport], Awaitable[None]]] = None,
    ):
        self.channel = channel
        self.backend = backend
        self.timings = timings or CallTimings()
        self.on_call_ended = on_call_ended

        self.log = ConversationLog()
        self.capture = VoiceCapture(channel)
        self.output = VoiceOutput(channel)
        self.recorder = AudioRecorder(channel, ack_timeout=self.timings.recording_ack_timeout)
        self.coordinator = TurnCoordinator(
            capture=self.capture,
            output=self.output,
            log=self.log,
            exchange=self.backend.chat,
            timings=self.timings,
            on_status=on_status,
            on_hangup=self.request_end,
        )

        self.last_report: Optional[CallReport] = None
        self._starting = False
        self._end_requested = False
        self._ending = False
        self._end_task: Optional[asyncio.Task] = None
        self._start_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> SessionState:
        return self.coordinator.state

    @property
    def artifact(self) -> Optional[AudioArtifact]:
        """Recording of the last finished call."""
        return self.recorder.artifact

    async def start_session(self, recognition_supported: bool = True) -> bool:
        """
        Start a new call.

        Resets all per-call state, acquires the microphone, then requests the
        opening greeting. Without a microphone the call never starts; if the
        greeting cannot be fetched the call is ended right away. An end
        requested while the microphone is being acquired ends the call as soon
        as the recorder is running.

        Args:
            recognition_supported: Whether the browser offers speech recognition

        Returns:
            True if the call is running after the greeting was received
        """
        self._starting = True
        try:
            return await self._start(recognition_supported)
        finally:
            self._starting = False
            self._end_requested = False

    async def _start(self, recognition_supported: bool) -> bool:
        if self._end_task is not None and not self._end_task.done():
            await self._end_task
        if self.state.is_call_active or self.recorder.is_recording:
            logger.warning("Start requested during a call, ending it first")
            await self.end_session()

        self.log.clear()
        self.recorder.reset()
        self.last_report = None
        self.coordinator.deactivate()

        if not recognition_supported:
            logger.error("Cannot start call: speech recognition unavailable")
            await self.coordinator.report_status(constants.STATUS_RECOGNITION_UNSUPPORTED)
            return False

        await self.coordinator.report_status(constants.STATUS_STARTING)

        try:
            await self.recorder.start()
        except CapturePermissionError as e:
            logger.error(f"Microphone error: {e}")
            await self.coordinator.report_status(constants.STATUS_MIC_UNAVAILABLE)
            return False
        except ChannelClosedError as e:
            logger.warning(f"Client gone before the call started: {e}")
            return False

        if self._end_requested:
            logger.info("Call ended by user while the microphone was starting")
            await self.end_session()
            return False

        self.coordinator.activate()
        logger.info("Call started")

        try:
            greeting = await self.backend.chat(
                [Message(role=MessageRole.USER, content=constants.GREETING_PROMPT)]
            )
        except BackendError as e:
            logger.error(f"Greeting failed: {e}")
            if not self.state.is_call_active:
                logger.info("Call already ended, not reporting the greeting failure")
                return False
            await self.coordinator.report_status(constants.STATUS_GREETING_FAILED)
            await self.end_session()
            return False

        if not self.state.is_call_active:
            logger.info("Call ended before the greeting arrived")
            return False

        self.coordinator.submit(GreetingReceived(text=greeting))
        return True

    def request_start(self, recognition_supported: bool = True) -> None:
        """Schedule start_session() without waiting for it."""
        if self._start_task is not None and not self._start_task.done():
            logger.warning("Call start already in progress")
            return
        self._start_task = asyncio.create_task(
            self.start_session(recognition_supported=recognition_supported)
        )

    def request_end(self) -> None:
        """
        Schedule end_session() without waiting for it.

        While a start is still acquiring the microphone there is no call to
        end yet; the request is recorded and start_session() honors it.
        """
        start_pending = self._starting or (
            self._start_task is not None and not self._start_task.done()
        )
        if start_pending and not (self.state.is_call_active or self.recorder.is_recording):
            logger.info("End requested while the call is starting")
            self._end_requested = True
            return
        if self._ending or (self._end_task is not None and not self._end_task.done()):
            return
        self._end_task = asyncio.create_task(self.end_session())

    async def end_session(self) -> Optional[CallReport]:
        """
        End the current call and deliver its results.

        Stops the state machine and any recognition, finalizes the recording,
        builds the transcript, asks the backend for a summary (falling back to
        a placeholder) and sends everything to the email endpoint. A failed
        delivery is reported through the status but the call stays ended.

        Returns:
            The call report, or None if no call was running
        """
        if self._ending:
            logger.debug("End already in progress")
            return None
        if not self.recorder.is_recording and not self.state.is_call_active:
            logger.debug("No call to end")
            return None

        self._ending = True
        try:
            await self.coordinator.end()

            artifact = await self.recorder.stop()
            transcript = self.log.transcript()
            summary = await self._summarize(transcript)

            await self.coordinator.report_status(constants.STATUS_SENDING)
            delivered = await self._deliver(transcript, summary, artifact)

            report = CallReport(
                transcript=transcript,
                summary=summary,
                artifact=artifact,
                delivered=delivered,
            )
            self.last_report = report
            if self.on_call_ended is not None:
                try:
                    await self.on_call_ended(report)
                except ChannelClosedError as e:
                    logger.warning(f"Could not notify client of call end: {e}")
            return report
        finally:
            self._ending = False

    async def _summarize(self, transcript: str) -> str:
        try:
            summary = await self.backend.summarize(transcript)
        except BackendError as e:
            logger.error(f"Summary generation failed: {e}")
            return constants.SUMMARY_FAILED
        return summary or constants.SUMMARY_EMPTY

    async def _deliver(
        self, transcript: str, summary: str, artifact: Optional[AudioArtifact]
    ) -> bool:
        try:
            await self.backend.send_email(transcript, summary, artifact)
        except BackendError as e:
            logger.error(f"Email sending failed: {e}")
            await self.coordinator.report_status(constants.STATUS_EMAIL_FAILED)
            return False
        await self.coordinator.report_status(constants.STATUS_EMAIL_SENT)
        return True

    async def close(self) -> None:
        """Tear down when the browser disconnects, ending a running call first."""
        self.channel.close()
        if self._start_task is not None and not self._start_task.done():
            self._start_task.cancel()
            try:
                await self._start_task
            except asyncio.CancelledError:
                pass
        if self.state.is_call_active or self.recorder.is_recording:
            await self.end_session()
        if self._end_task is not None and not self._end_task.done():
            await self._end_task
        await self.coordinator.close()
