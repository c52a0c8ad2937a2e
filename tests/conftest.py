import asyncio
import logging
from typing import Callable, List

import pytest

from voice_call.config.settings import CallTimings
from voice_call.exceptions import ChannelClosedError


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)
    yield


class FakeChannel:
    """In-memory stand-in for ClientChannel that records every sent message."""

    def __init__(self):
        self.sent: List = []
        self.hooks: List[Callable] = []
        self._closed = False

    @property
    def closed(self):
        return self._closed

    async def send(self, message):
        if self._closed:
            raise ChannelClosedError(f"Cannot send {message.type}: channel closed")
        self.sent.append(message)
        for hook in self.hooks:
            hook(message)

    def close(self):
        self._closed = True

    def types(self):
        return [message.type for message in self.sent]

    def of_type(self, message_type):
        return [message for message in self.sent if message.type == message_type]


def auto_ack_recorder(channel, recorder, chunks=(b"chunk-1", b"chunk-2"), deny=None):
    """Answer recorder commands the way the browser does."""

    def hook(message):
        if message.type == "recording.start":
            if deny:
                recorder.mark_failed(deny)
            else:
                recorder.mark_started()
        elif message.type == "recording.stop":
            for chunk in chunks:
                recorder.add_chunk(chunk)
            recorder.mark_stopped("audio/webm")

    channel.hooks.append(hook)


async def wait_until(predicate, timeout=1.0):
    """Poll predicate while letting the event loop run."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not met in time")
        await asyncio.sleep(0.005)


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def timings():
    return CallTimings(
        settle_delay=0,
        recognition_end_delay=0,
        no_speech_delay=0,
        start_retry_delay=0,
        recognition_error_delay=0,
        exchange_retry_delay=0,
        recording_ack_timeout=0.2,
    )
