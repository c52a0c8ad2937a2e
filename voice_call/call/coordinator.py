"""
Turn coordinator: the state machine behind a voice call.

The coordinator sequences one conversational turn after another:

    Idle -> Listening -> Thinking -> Speaking -> Idle -> Listening ...

and ends the call when the assistant says a termination phrase or the user
hangs up. Browser callbacks arrive as events on a queue; the coordinator is
the only component that changes the SessionState, and it never starts
recognition while speaking or speaks while recognition runs.

Retries and resumes are timer tasks. They are cancelled as a group when the
call ends, and each one re-checks that the call is still active before
submitting its event.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Set, Type

from voice_call.call.events import (
    CallEvent,
    ExchangeFailed,
    ExchangeSucceeded,
    GreetingReceived,
    ListenRequested,
    RecognitionEnded,
    RecognitionFailed,
    SynthesisFailed,
    SynthesisFinished,
    UtteranceRecognized,
)
from voice_call.config import constants
from voice_call.config.constants import LOGGER_NAME, TERMINATION_PHRASES
from voice_call.config.settings import CallTimings
from voice_call.exceptions import CaptureStartError, ChannelClosedError
from voice_call.models.conversation import ConversationLog, Message, MessageRole
from voice_call.models.session_state import CallState, SessionState
from voice_call.speech.capture import VoiceCapture
from voice_call.speech.output import VoiceOutput

logger = logging.getLogger(LOGGER_NAME)

ExchangeFunc = Callable[[List[Message]], Awaitable[str]]
StatusListener = Callable[[SessionState], Awaitable[None]]


def is_termination_phrase(text: str) -> bool:
    """Return True if the assistant text asks to end the call."""
    lower = text.lower()
    return any(phrase in lower for phrase in TERMINATION_PHRASES)


class TurnCoordinator:
    """
    Serializes every state change of a call.

    Events are submitted with submit() and consumed by the run loop started
    with start(); handle() applies a single event.
    """

    def __init__(
        self,
        capture: VoiceCapture,
        output: VoiceOutput,
        log: ConversationLog,
        exchange: ExchangeFunc,
        timings: Optional[CallTimings] = None,
        on_status: Optional[StatusListener] = None,
        on_hangup: Optional[Callable[[], None]] = None,
    ):
        """
        Args:
            capture: Speech recognition wrapper
            output: Speech synthesis wrapper
            log: Conversation log the turns are appended to
            exchange: Coroutine function sending the history to the chat backend
            timings: Retry and settle delays
            on_status: Awaited with the session state after every status change
            on_hangup: Called when the assistant ended the call
        """
        self.capture = capture
        self.output = output
        self.log = log
        self.exchange = exchange
        self.timings = timings or CallTimings()
        self.on_status = on_status
        self.on_hangup = on_hangup

        self.state = SessionState()
        self._queue: asyncio.Queue = asyncio.Queue()
        self._timers: Set[asyncio.Task] = set()
        self._exchange_task: Optional[asyncio.Task] = None
        self._run_task: Optional[asyncio.Task] = None
        self._capture_blocked = False

        self._handlers: Dict[Type[CallEvent], Callable[[CallEvent], Awaitable[None]]] = {
            UtteranceRecognized: self._on_utterance,
            RecognitionEnded: self._on_recognition_ended,
            RecognitionFailed: self._on_recognition_failed,
            SynthesisFinished: self._on_synthesis_finished,
            SynthesisFailed: self._on_synthesis_failed,
            GreetingReceived: self._on_greeting,
            ExchangeSucceeded: self._on_exchange_succeeded,
            ExchangeFailed: self._on_exchange_failed,
            ListenRequested: self._on_listen_requested,
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the event loop task if it is not running."""
        if self._run_task is None or self._run_task.done():
            self._run_task = asyncio.create_task(self._run())

    async def close(self) -> None:
        """Deactivate the call and stop the event loop task."""
        self.deactivate()
        if self._run_task is not None:
            self._run_task.cancel()
            try:
                await self._run_task
            except asyncio.CancelledError:
                pass
            self._run_task = None

    def activate(self) -> None:
        """Reset the state for a new call and mark it active."""
        self._cancel_pending()
        self._discard_queued_events()
        self.state.reset()
        self.state.is_call_active = True
        self._capture_blocked = False
        logger.info("Call activated")

    def deactivate(self) -> None:
        """Mark the call ended and cancel pending retries and exchanges."""
        was_active = self.state.is_call_active
        self.state.is_call_active = False
        self.state.call_state = CallState.ENDED
        self._cancel_pending()
        if was_active:
            logger.info("Call deactivated")

    async def end(self) -> None:
        """
        End the call on behalf of the user.

        Stops recognition and cancels speech that is in progress.
        """
        was_speaking = self.state.is_speaking
        self.deactivate()
        try:
            if self.capture.running:
                await self.capture.stop()
            if was_speaking:
                await self.output.cancel()
        except ChannelClosedError as e:
            logger.warning(f"Could not release speech services: {e}")
        await self.report_status(constants.STATUS_CALL_ENDED)

    def submit(self, event: CallEvent) -> None:
        """Queue an event for the run loop."""
        self._queue.put_nowait(event)

    async def report_status(self, status: str) -> None:
        """Set the human readable status and notify the listener."""
        self.state.status = status
        logger.info(f"Status: {status}")
        if self.on_status is None:
            return
        try:
            await self.on_status(self.state)
        except ChannelClosedError as e:
            logger.warning(f"Could not deliver status update: {e}")

    # ------------------------------------------------------------------
    # Event processing
    # ------------------------------------------------------------------

    async def _run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self.handle(event)
            except ChannelClosedError as e:
                logger.warning(f"Client unreachable while handling {type(event).__name__}: {e}")
            except Exception as e:
                logger.error(f"Error handling {type(event).__name__}: {e}", exc_info=True)

    async def handle(self, event: CallEvent) -> None:
        """Apply a single event to the state machine."""
        if isinstance(event, (RecognitionEnded, RecognitionFailed)):
            self.capture.mark_ended()

        if not self.state.is_call_active:
            logger.debug(f"Ignoring {type(event).__name__}: call not active")
            return

        handler = self._handlers.get(type(event))
        if handler is None:
            logger.warning(f"No handler for event {type(event).__name__}")
            return
        await handler(event)

    def _transition(self, new_state: CallState) -> bool:
        if not self.state.is_call_active:
            return False
        if self.state.call_state is not new_state:
            logger.debug(f"{self.state.call_state.value} -> {new_state.value}")
        self.state.call_state = new_state
        return True

    async def _on_utterance(self, event: UtteranceRecognized) -> None:
        text = event.text.strip()
        if not text:
            return
        if self.state.call_state in (CallState.SPEAKING, CallState.THINKING):
            logger.debug(f"Ignoring utterance while {self.state.call_state.value}")
            return

        self._transition(CallState.THINKING)
        self.log.add_user_turn(text)
        self.log.add_message(MessageRole.USER, text)
        logger.info(f"Heard: {text!r}")

        await self.capture.stop()
        await self.report_status(constants.STATUS_THINKING)
        self._exchange_task = asyncio.create_task(self._exchange(self.log.messages))

    async def _exchange(self, messages: List[Message]) -> None:
        try:
            text = await self.exchange(messages)
        except Exception as e:
            logger.error(f"Backend exchange failed: {e}")
            self.submit(ExchangeFailed(error=str(e)))
            return
        self.submit(ExchangeSucceeded(text=text))

    async def _on_greeting(self, event: GreetingReceived) -> None:
        if self.state.call_state is not CallState.IDLE:
            logger.warning(f"Ignoring greeting while {self.state.call_state.value}")
            return
        self.log.add_message(MessageRole.ASSISTANT, event.text)
        if not event.text.strip():
            self._schedule_listen(0, "empty greeting")
            return
        await self._speak(event.text)

    async def _on_exchange_succeeded(self, event: ExchangeSucceeded) -> None:
        if not self.state.is_thinking:
            logger.warning("Ignoring backend reply received outside of thinking")
            return
        text = event.text
        if not text.strip():
            logger.warning("Backend returned an empty reply")
            self._transition(CallState.IDLE)
            self._schedule_listen(self.timings.exchange_retry_delay, "empty reply")
            return

        self.log.add_message(MessageRole.ASSISTANT, text)
        if is_termination_phrase(text):
            self.log.add_agent_turn(text)
            logger.info("Assistant ended the call")
            self.deactivate()
            if self.on_hangup is not None:
                self.on_hangup()
            return

        await self._speak(text)

    async def _on_exchange_failed(self, event: ExchangeFailed) -> None:
        if not self.state.is_thinking:
            return
        self._transition(CallState.IDLE)
        await self.report_status(constants.STATUS_CONNECTION_ERROR)
        self._schedule_listen(self.timings.exchange_retry_delay, "exchange failed")

    async def _speak(self, text: str) -> None:
        was_listening = self.state.is_listening
        self._transition(CallState.SPEAKING)
        self.log.add_agent_turn(text)
        if was_listening or self.capture.running:
            await self.capture.stop()
        await self.report_status(constants.STATUS_SPEAKING)
        await self.output.speak(text)

    async def _on_synthesis_finished(self, event: SynthesisFinished) -> None:
        if not self.state.is_speaking:
            return
        self._transition(CallState.IDLE)
        await self.report_status(constants.STATUS_LISTENING)
        self._schedule_listen(self.timings.settle_delay, "synthesis finished")

    async def _on_synthesis_failed(self, event: SynthesisFailed) -> None:
        if not self.state.is_speaking:
            return
        logger.error(f"Speech synthesis failed: {event.error}")
        self._transition(CallState.IDLE)
        await self._start_listening()

    async def _on_recognition_ended(self, event: RecognitionEnded) -> None:
        if self.state.is_listening:
            self._transition(CallState.IDLE)
        if self.state.call_state is CallState.IDLE:
            self._schedule_listen(self.timings.recognition_end_delay, "recognition ended")

    async def _on_recognition_failed(self, event: RecognitionFailed) -> None:
        if self.state.is_listening:
            self._transition(CallState.IDLE)
        error = event.error
        logger.warning(f"Recognition error: {error}")

        if error in constants.RECOGNITION_PERMISSION_ERRORS:
            self._capture_blocked = True
            await self.report_status(constants.STATUS_MIC_PERMISSION_DENIED)
            return
        if error == constants.RECOGNITION_ERROR_SERVICE_NOT_ALLOWED:
            self._capture_blocked = True
            await self.report_status(constants.STATUS_SPEECH_SERVICE_UNAVAILABLE)
            return

        if self.state.call_state is not CallState.IDLE:
            return
        if error == constants.RECOGNITION_ERROR_NO_SPEECH:
            delay = self.timings.no_speech_delay
        elif error == constants.RECOGNITION_ERROR_START_FAILED:
            delay = self.timings.start_retry_delay
        else:
            delay = self.timings.recognition_error_delay
        self._schedule_listen(delay, f"recognition error {error}")

    async def _on_listen_requested(self, event: ListenRequested) -> None:
        await self._start_listening()

    async def _start_listening(self) -> None:
        if not self.state.is_call_active or self._capture_blocked:
            return
        if self.state.call_state is not CallState.IDLE:
            return

        self._transition(CallState.LISTENING)
        try:
            await self.capture.start()
        except CaptureStartError as e:
            logger.warning(f"Recognition start failed: {e}")
            if self.state.is_listening:
                self._transition(CallState.IDLE)
            self._schedule_listen(self.timings.start_retry_delay, "start failed")
            return
        await self.report_status(constants.STATUS_LISTENING)

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _schedule_listen(self, delay: float, reason: str) -> None:
        task = asyncio.create_task(self._listen_after(delay, reason))
        self._timers.add(task)
        task.add_done_callback(self._timers.discard)

    async def _listen_after(self, delay: float, reason: str) -> None:
        await asyncio.sleep(delay)
        if not self.state.is_call_active:
            return
        self.submit(ListenRequested(reason=reason))

    @property
    def pending_timers(self) -> int:
        return len(self._timers)

    def _cancel_pending(self) -> None:
        for task in list(self._timers):
            task.cancel()
        self._timers.clear()
        if self._exchange_task is not None and not self._exchange_task.done():
            self._exchange_task.cancel()
        self._exchange_task = None

    def _discard_queued_events(self) -> None:
        while not self._queue.empty():
            self._queue.get_nowait()
