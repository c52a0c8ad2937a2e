"""
Events consumed by the turn coordinator.

Browser handlers, retry timers and backend exchange tasks never change the
session state themselves; they submit one of these events and the
coordinator applies the transition.
"""

from pydantic import BaseModel, ConfigDict


class CallEvent(BaseModel):
    """Base model for coordinator events."""

    model_config = ConfigDict(frozen=True)


class UtteranceRecognized(CallEvent):
    """Speech recognition produced a final result."""

    text: str


class RecognitionEnded(CallEvent):
    """The browser's recognition run ended."""


class RecognitionFailed(CallEvent):
    """The browser's recognition run failed with an error code."""

    error: str


class SynthesisFinished(CallEvent):
    """The browser finished speaking."""


class SynthesisFailed(CallEvent):
    """The browser could not speak the utterance."""

    error: str = "unknown"


class GreetingReceived(CallEvent):
    """The opening assistant utterance arrived."""

    text: str


class ExchangeSucceeded(CallEvent):
    """The chat backend answered."""

    text: str


class ExchangeFailed(CallEvent):
    """The chat backend request failed."""

    error: str


class ListenRequested(CallEvent):
    """A delayed request to resume listening."""

    reason: str = ""
