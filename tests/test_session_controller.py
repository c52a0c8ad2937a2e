"""
Tests for the SessionController call lifecycle.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from conftest import auto_ack_recorder, wait_until
from voice_call.call.events import SynthesisFinished, UtteranceRecognized
from voice_call.call.session import SessionController
from voice_call.config import constants
from voice_call.exceptions import BackendError
from voice_call.models.conversation import Message
from voice_call.services.backend_client import BackendClient


@pytest.fixture
def backend():
    backend = AsyncMock(spec=BackendClient)
    backend.chat.return_value = "Hello, I'm your mortgage assistant."
    backend.summarize.return_value = "The caller asked about rates."
    backend.send_email.return_value = {"ok": True}
    return backend


@pytest.fixture
def controller(channel, backend, timings):
    controller = SessionController(channel, backend, timings=timings)
    auto_ack_recorder(channel, controller.recorder)
    return controller


@pytest.mark.asyncio
async def test_start_session_requests_greeting(controller, channel, backend):
    started = await controller.start_session()

    assert started is True
    assert controller.state.is_call_active
    assert controller.recorder.is_recording
    backend.chat.assert_awaited_once_with(
        [Message(role="user", content=constants.GREETING_PROMPT)]
    )
    assert channel.types()[0] == "recording.start"

    controller.coordinator.start()
    await wait_until(lambda: controller.state.is_speaking)
    assert controller.log.transcript() == "Agent: Hello, I'm your mortgage assistant."
    # the synthetic greeting instruction is not part of the history
    assert [m.role for m in controller.log.messages] == ["assistant"]

    await controller.close()


@pytest.mark.asyncio
async def test_microphone_denied_aborts_before_any_turn(channel, backend, timings):
    controller = SessionController(channel, backend, timings=timings)
    auto_ack_recorder(channel, controller.recorder, deny="NotAllowedError")

    started = await controller.start_session()

    assert started is False
    assert not controller.state.is_call_active
    assert len(controller.log) == 0
    assert controller.state.status == constants.STATUS_MIC_UNAVAILABLE
    backend.chat.assert_not_awaited()
    backend.send_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_microphone_timeout_aborts(channel, backend, timings):
    controller = SessionController(channel, backend, timings=timings)

    started = await controller.start_session()

    assert started is False
    assert controller.state.status == constants.STATUS_MIC_UNAVAILABLE
    backend.chat.assert_not_awaited()


@pytest.mark.asyncio
async def test_recognition_unsupported_never_starts(controller, channel, backend):
    started = await controller.start_session(recognition_supported=False)

    assert started is False
    assert controller.state.status == constants.STATUS_RECOGNITION_UNSUPPORTED
    assert "recording.start" not in channel.types()
    backend.chat.assert_not_awaited()


@pytest.mark.asyncio
async def test_greeting_failure_ends_call(controller, backend):
    backend.chat.side_effect = BackendError("chat", "chat failed", 500)

    started = await controller.start_session()

    assert started is False
    assert not controller.state.is_call_active
    assert not controller.recorder.is_recording
    backend.send_email.assert_awaited_once()


@pytest.mark.asyncio
async def test_end_while_microphone_is_starting(channel, backend, timings):
    controller = SessionController(channel, backend, timings=timings)
    controller.coordinator.start()

    controller.request_start()
    await wait_until(lambda: "recording.start" in channel.types())
    controller.request_end()
    controller.recorder.mark_started()
    await wait_until(lambda: controller._start_task.done())

    assert controller._start_task.result() is False
    assert not controller.state.is_call_active
    assert not controller.recorder.is_recording
    assert channel.of_type("synthesis.speak") == []
    backend.chat.assert_not_awaited()
    assert controller.last_report is not None
    assert controller.state.status == constants.STATUS_EMAIL_SENT

    await controller.close()


@pytest.mark.asyncio
async def test_end_requested_before_start_runs(controller, channel, backend):
    controller.request_start()
    controller.request_end()
    await wait_until(lambda: controller._start_task.done())

    assert controller._start_task.result() is False
    assert not controller.state.is_call_active
    assert channel.of_type("synthesis.speak") == []
    backend.chat.assert_not_awaited()


@pytest.mark.asyncio
async def test_late_greeting_failure_keeps_final_status(controller, backend):
    gate = asyncio.Event()

    async def slow_failure(messages):
        await gate.wait()
        raise BackendError("chat", "chat failed", 503)

    backend.chat.side_effect = slow_failure
    controller.request_start()
    await wait_until(lambda: backend.chat.await_count == 1)

    controller.request_end()
    await wait_until(lambda: controller.last_report is not None)
    gate.set()
    await wait_until(lambda: controller._start_task.done())

    assert controller._start_task.result() is False
    assert controller.state.status == constants.STATUS_EMAIL_SENT
    backend.send_email.assert_awaited_once()


@pytest.mark.asyncio
async def test_start_after_client_left(controller, channel, backend):
    channel.close()

    started = await controller.start_session()

    assert started is False
    assert not controller.state.is_call_active
    backend.chat.assert_not_awaited()


@pytest.mark.asyncio
async def test_end_session_delivers_transcript_summary_and_audio(controller, backend):
    await controller.start_session()
    # keep the greeting out of the log by not running the event loop
    controller.log.add_user_turn("hi")
    controller.log.add_agent_turn("hello")

    report = await controller.end_session()

    backend.summarize.assert_awaited_once_with("You: hi\n\nAgent: hello")
    transcript, summary, artifact = backend.send_email.await_args.args
    assert transcript == "You: hi\n\nAgent: hello"
    assert summary == "The caller asked about rates."
    assert artifact.data == b"chunk-1chunk-2"
    assert artifact.mime_type == "audio/webm"
    assert report.delivered is True
    assert report.summary not in (constants.SUMMARY_FAILED, constants.SUMMARY_EMPTY)
    assert controller.state.status == constants.STATUS_EMAIL_SENT
    assert controller.artifact is artifact
    assert not controller.state.is_call_active


@pytest.mark.asyncio
async def test_summary_failure_uses_placeholder(controller, backend):
    backend.summarize.side_effect = BackendError("summary", "summary endpoint failed", 500)
    await controller.start_session()

    report = await controller.end_session()

    assert report.summary == constants.SUMMARY_FAILED
    assert backend.send_email.await_args.args[1] == constants.SUMMARY_FAILED
    assert report.delivered is True


@pytest.mark.asyncio
async def test_empty_summary_uses_placeholder(controller, backend):
    backend.summarize.return_value = ""
    await controller.start_session()

    report = await controller.end_session()

    assert report.summary == constants.SUMMARY_EMPTY


@pytest.mark.asyncio
async def test_delivery_failure_is_reported(controller, backend):
    backend.send_email.side_effect = BackendError("email", "Email endpoint failed", 500)
    await controller.start_session()

    report = await controller.end_session()

    assert report.delivered is False
    assert controller.state.status == constants.STATUS_EMAIL_FAILED
    assert not controller.state.is_call_active
    backend.send_email.assert_awaited_once()


@pytest.mark.asyncio
async def test_end_without_call_is_noop(controller, backend):
    assert await controller.end_session() is None
    backend.summarize.assert_not_awaited()


@pytest.mark.asyncio
async def test_second_end_is_ignored(controller, backend):
    await controller.start_session()

    await controller.end_session()
    assert await controller.end_session() is None

    backend.send_email.assert_awaited_once()


@pytest.mark.asyncio
async def test_start_twice_resets_log_and_audio(controller, backend):
    await controller.start_session()
    controller.log.add_user_turn("from the first call")

    await controller.start_session()

    assert len(controller.log) == 0
    assert controller.recorder.buffered_bytes == 0
    assert controller.artifact is None
    assert controller.state.is_call_active
    # the first call was wrapped up before the new one started
    assert backend.send_email.await_args.args[0] == "You: from the first call"

    await controller.close()


@pytest.mark.asyncio
async def test_assistant_goodbye_ends_and_delivers(controller, backend):
    await controller.start_session()
    controller.coordinator.start()
    await wait_until(lambda: controller.state.is_speaking)

    backend.chat.return_value = "Thanks for calling, goodbye!"
    controller.coordinator.submit(SynthesisFinished())
    await wait_until(lambda: controller.state.is_listening)
    controller.coordinator.submit(UtteranceRecognized(text="That is all"))
    await wait_until(lambda: backend.send_email.await_count == 1)

    transcript = backend.send_email.await_args.args[0]
    assert transcript == (
        "Agent: Hello, I'm your mortgage assistant.\n\n"
        "You: That is all\n\n"
        "Agent: Thanks for calling, goodbye!"
    )
    assert not controller.state.is_call_active

    await controller.close()


@pytest.mark.asyncio
async def test_close_ends_running_call(controller, backend):
    await controller.start_session()

    await controller.close()

    assert not controller.state.is_call_active
    backend.send_email.assert_awaited_once()
