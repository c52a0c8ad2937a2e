"""
Exceptions raised across the voice call service.

The hierarchy mirrors how each failure is treated during a call:

- CapturePermissionError: the microphone could not be acquired; the attempt
  is aborted and reported, never retried.
- CaptureStartError: recognition could not start (usually already running);
  transient, retried after a delay.
- BackendError: a chat, summary or email request failed.
"""

from typing import Optional


class VoiceCallError(Exception):
    """Base class for every error raised by this package."""


class CaptureError(VoiceCallError):
    """Base class for audio capture and speech recognition failures."""


class CapturePermissionError(CaptureError):
    """Raised when access to the microphone is denied or unavailable."""

    def __init__(self, reason: str = "permission denied"):
        super().__init__(f"Microphone unavailable: {reason}")
        self.reason = reason


class CaptureStartError(CaptureError):
    """Raised when speech recognition cannot be started right now."""


class ChannelClosedError(VoiceCallError):
    """Raised when a command is sent after the client connection went away."""


class BackendError(VoiceCallError):
    """
    Raised when a backend endpoint fails.

    Carries the endpoint name and, when the server answered, its HTTP status.
    """

    def __init__(self, endpoint: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code

    def __str__(self):
        return f"[{self.endpoint}] {super().__str__()}"
