"""
Unit tests for the message schemas.

These tests validate that the Pydantic models correctly validate message data
and that the validation rules work as expected.
"""

import base64
import json

import pytest
from pydantic import ValidationError

from voice_call.models.message_schemas import (
    CallEndedMessage,
    CallStartMessage,
    RecognitionErrorMessage,
    RecognitionResultMessage,
    RecognitionStartCommand,
    RecordingChunkMessage,
    StatusMessage,
    SynthesisErrorMessage,
    SynthesisSpeakCommand,
    VoicesChangedMessage,
)


class TestIncomingFromDict:
    """Tests for building incoming models from decoded browser JSON."""

    def test_call_start(self):
        message = CallStartMessage(**{"type": "call.start", "recognitionSupported": False})
        assert message.recognitionSupported is False

    def test_call_start_defaults_to_supported(self):
        message = CallStartMessage(**{"type": "call.start"})
        assert message.recognitionSupported is True

    def test_recognition_result(self):
        message = RecognitionResultMessage(
            **{"type": "recognition.result", "transcript": "hello", "confidence": 0.9}
        )
        assert message.transcript == "hello"
        assert message.confidence == pytest.approx(0.9)

    def test_voices_changed(self):
        message = VoicesChangedMessage(
            **{
                "type": "voices.changed",
                "voices": [{"name": "Samantha", "lang": "en-US", "localService": True}],
            }
        )
        assert message.voices[0].name == "Samantha"

    def test_voices_changed_defaults_to_empty(self):
        assert VoicesChangedMessage(type="voices.changed").voices == []

    def test_missing_type(self):
        with pytest.raises(ValidationError):
            CallStartMessage(**{})


class TestIncomingValidation:
    def test_confidence_out_of_range(self):
        with pytest.raises(ValidationError):
            RecognitionResultMessage(type="recognition.result", transcript="hi", confidence=1.5)

    def test_empty_error_code(self):
        with pytest.raises(ValidationError):
            RecognitionErrorMessage(type="recognition.error", error="  ")

    def test_synthesis_error_defaults_to_unknown(self):
        assert SynthesisErrorMessage(type="synthesis.error").error == "unknown"

    def test_valid_audio_chunk(self):
        chunk = base64.b64encode(b"webm data").decode("utf-8")
        message = RecordingChunkMessage(type="recording.chunk", audioChunk=chunk)
        assert message.audioChunk == chunk

    def test_invalid_audio_chunk(self):
        with pytest.raises(ValidationError) as exc_info:
            RecordingChunkMessage(type="recording.chunk", audioChunk="not base64!")
        assert "Invalid base64" in str(exc_info.value)

    def test_empty_audio_chunk(self):
        with pytest.raises(ValidationError):
            RecordingChunkMessage(type="recording.chunk", audioChunk="")

    def test_wrong_literal_type(self):
        with pytest.raises(ValidationError):
            CallStartMessage(type="call.end")


class TestOutgoingMessages:
    def test_recognition_start_defaults(self):
        command = RecognitionStartCommand()
        assert command.model_dump() == {
            "type": "recognition.start",
            "lang": "en-US",
            "continuous": True,
            "interimResults": False,
            "maxAlternatives": 3,
        }

    def test_speak_requires_text(self):
        with pytest.raises(ValidationError):
            SynthesisSpeakCommand(text="   ")

    def test_speak_serializes_voice_and_prosody(self):
        command = SynthesisSpeakCommand(text="Hello", voice="Samantha")
        data = json.loads(command.model_dump_json())
        assert data["type"] == "synthesis.speak"
        assert data["voice"] == "Samantha"
        assert data["rate"] == pytest.approx(1.05)

    def test_status_message(self):
        message = StatusMessage(
            status="Listening...",
            state="listening",
            isCallActive=True,
            isListening=True,
            isSpeaking=False,
        )
        assert message.type == "status"

    def test_call_ended_message(self):
        message = CallEndedMessage(transcript="You: hi", summary="Short.", delivered=True)
        assert json.loads(message.model_dump_json())["type"] == "call.ended"
