"""
Session state for the turn coordinator.

The state of a call is a single CallState value. The listening and speaking
flags are derived from it, so they can never both be true.
"""

from enum import Enum

from voice_call.config.constants import STATUS_READY


class CallState(str, Enum):
    """States of the turn coordinator."""

    IDLE = "idle"
    LISTENING = "listening"
    THINKING = "thinking"
    SPEAKING = "speaking"
    ENDED = "ended"


class SessionState:
    """
    Mutable state of one call, owned and mutated only by the TurnCoordinator.

    Capture and output callbacks never touch this object; they submit events
    to the coordinator instead.
    """

    def __init__(self):
        self.call_state = CallState.IDLE
        self.is_call_active = False
        self.status = STATUS_READY

    @property
    def is_listening(self) -> bool:
        return self.call_state is CallState.LISTENING

    @property
    def is_speaking(self) -> bool:
        return self.call_state is CallState.SPEAKING

    @property
    def is_thinking(self) -> bool:
        return self.call_state is CallState.THINKING

    def reset(self) -> None:
        self.call_state = CallState.IDLE
        self.is_call_active = False
        self.status = STATUS_READY

    def snapshot(self) -> dict:
        """Return a plain dict view, used for status messages and health output."""
        return {
            "state": self.call_state.value,
            "isCallActive": self.is_call_active,
            "isListening": self.is_listening,
            "isSpeaking": self.is_speaking,
            "status": self.status,
        }

    def __repr__(self):
        return (
            f"SessionState(call_state={self.call_state.value!r}, "
            f"is_call_active={self.is_call_active}, status={self.status!r})"
        )
