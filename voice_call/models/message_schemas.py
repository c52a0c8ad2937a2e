"""
Pydantic models for the browser channel message schemas.

The browser owns the platform speech APIs and the media recorder. It reports
what happened through incoming event messages and is driven through outgoing
command messages. This module defines both sides, providing type validation
and documentation for every message exchanged over the call WebSocket.
"""

import base64
import binascii
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from voice_call.config import constants


# Base Models
class BaseMessage(BaseModel):
    """Base model for all WebSocket messages."""

    type: str = Field(..., description="Message type identifier")


def _validate_base64(v: str) -> str:
    if not v:
        raise ValueError("Audio chunk cannot be empty")
    try:
        base64.b64decode(v, validate=True)
    except (binascii.Error, ValueError):
        raise ValueError("Invalid base64 encoded audio data")
    return v


# Call Messages
class CallStartMessage(BaseMessage):
    """Model for call.start message from the browser."""

    type: Literal["call.start"]
    recognitionSupported: bool = Field(
        True, description="Whether the browser exposes speech recognition"
    )


class CallEndMessage(BaseMessage):
    """Model for call.end message from the browser (user hung up)."""

    type: Literal["call.end"]


# Recognition Messages
class RecognitionResultMessage(BaseMessage):
    """Model for recognition.result message from the browser."""

    type: Literal["recognition.result"]
    transcript: str = Field(..., description="Best alternative of the last result")
    confidence: Optional[float] = Field(None, ge=0, le=1)


class RecognitionEndMessage(BaseMessage):
    """Model for recognition.end message from the browser."""

    type: Literal["recognition.end"]


class RecognitionErrorMessage(BaseMessage):
    """Model for recognition.error message from the browser."""

    type: Literal["recognition.error"]
    error: str = Field(..., description="Error code, e.g. no-speech or not-allowed")
    message: Optional[str] = Field(None, description="Optional human readable detail")

    @field_validator("error")
    def validate_error(cls, v):
        """Validate that the error code is not empty."""
        if not v.strip():
            raise ValueError("Error code cannot be empty")
        return v


# Synthesis Messages
class SynthesisEndMessage(BaseMessage):
    """Model for synthesis.end message from the browser."""

    type: Literal["synthesis.end"]


class SynthesisErrorMessage(BaseMessage):
    """Model for synthesis.error message from the browser."""

    type: Literal["synthesis.error"]
    error: str = Field("unknown", description="Error code reported by the browser")


class VoiceInfo(BaseModel):
    """A speech synthesis voice available in the browser."""

    name: str
    lang: str = ""
    localService: bool = True
    default: bool = False


class VoicesChangedMessage(BaseMessage):
    """Model for voices.changed message listing the available voices."""

    type: Literal["voices.changed"]
    voices: List[VoiceInfo] = Field(default_factory=list)


# Recording Messages
class RecordingStartedMessage(BaseMessage):
    """Model for recording.started message from the browser."""

    type: Literal["recording.started"]


class RecordingChunkMessage(BaseMessage):
    """Model for recording.chunk message from the browser."""

    type: Literal["recording.chunk"]
    audioChunk: str = Field(..., description="Base64-encoded recorded audio")

    @field_validator("audioChunk")
    def validate_audio_chunk(cls, v):
        """Validate that audio chunk is valid base64."""
        return _validate_base64(v)


class RecordingStoppedMessage(BaseMessage):
    """Model for recording.stopped message from the browser."""

    type: Literal["recording.stopped"]
    mimeType: Optional[str] = Field(None, description="Container type of the chunks")


class RecordingErrorMessage(BaseMessage):
    """Model for recording.error message from the browser."""

    type: Literal["recording.error"]
    error: str = Field(..., description="Reason the recorder could not run")


# Outgoing Messages
class StatusMessage(BaseMessage):
    """Model for status message pushed to the browser."""

    type: Literal["status"] = "status"
    status: str
    state: str
    isCallActive: bool
    isListening: bool
    isSpeaking: bool


class RecognitionStartCommand(BaseMessage):
    """Model for recognition.start command to the browser."""

    type: Literal["recognition.start"] = "recognition.start"
    lang: str = constants.RECOGNITION_LANG
    continuous: bool = constants.RECOGNITION_CONTINUOUS
    interimResults: bool = constants.RECOGNITION_INTERIM_RESULTS
    maxAlternatives: int = Field(constants.RECOGNITION_MAX_ALTERNATIVES, ge=1)


class RecognitionStopCommand(BaseMessage):
    """Model for recognition.stop command to the browser."""

    type: Literal["recognition.stop"] = "recognition.stop"


class SynthesisSpeakCommand(BaseMessage):
    """Model for synthesis.speak command to the browser."""

    type: Literal["synthesis.speak"] = "synthesis.speak"
    text: str
    voice: Optional[str] = Field(None, description="Voice name, None for browser default")
    rate: float = Field(constants.SYNTHESIS_RATE, gt=0, le=10)
    pitch: float = Field(constants.SYNTHESIS_PITCH, ge=0, le=2)
    volume: float = Field(constants.SYNTHESIS_VOLUME, ge=0, le=1)

    @field_validator("text")
    def validate_text(cls, v):
        """Validate that there is something to speak."""
        if not v.strip():
            raise ValueError("Text to speak cannot be empty")
        return v


class SynthesisCancelCommand(BaseMessage):
    """Model for synthesis.cancel command to the browser."""

    type: Literal["synthesis.cancel"] = "synthesis.cancel"


class RecordingStartCommand(BaseMessage):
    """Model for recording.start command to the browser."""

    type: Literal["recording.start"] = "recording.start"


class RecordingStopCommand(BaseMessage):
    """Model for recording.stop command to the browser."""

    type: Literal["recording.stop"] = "recording.stop"


class RecordingReadyMessage(BaseMessage):
    """Model for recording.ready message with the download location."""

    type: Literal["recording.ready"] = "recording.ready"
    url: str
    filename: str
    mimeType: str
    size: int = Field(..., ge=0)


class CallEndedMessage(BaseMessage):
    """Model for call.ended message sent once the call is wrapped up."""

    type: Literal["call.ended"] = "call.ended"
    transcript: str
    summary: str
    delivered: bool


# Union type for all possible incoming messages
IncomingMessage = Union[
    CallStartMessage,
    CallEndMessage,
    RecognitionResultMessage,
    RecognitionEndMessage,
    RecognitionErrorMessage,
    SynthesisEndMessage,
    SynthesisErrorMessage,
    VoicesChangedMessage,
    RecordingStartedMessage,
    RecordingChunkMessage,
    RecordingStoppedMessage,
    RecordingErrorMessage,
]

# Union type for all possible outgoing messages
OutgoingMessage = Union[
    StatusMessage,
    RecognitionStartCommand,
    RecognitionStopCommand,
    SynthesisSpeakCommand,
    SynthesisCancelCommand,
    RecordingStartCommand,
    RecordingStopCommand,
    RecordingReadyMessage,
    CallEndedMessage,
]
