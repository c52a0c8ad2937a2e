"""
Models module for data structures and state of a voice call.

Key components:
- conversation: Turn and Message models and the append-only ConversationLog
  that produces the call transcript and the chat backend history.
- session_state: CallState enumeration and the SessionState owned by the
  turn coordinator.
- artifact: AudioArtifact, the finished recording of a call.
- message_schemas: Pydantic models for every event the browser sends and
  every command the server sends back over the call WebSocket.

Usage examples:
```python
from voice_call.models import ConversationLog, RecognitionResultMessage

log = ConversationLog()
log.add_user_turn("hi")
log.add_agent_turn("hello")
assert log.transcript() == "You: hi\\n\\nAgent: hello"

message = RecognitionResultMessage(type="recognition.result", transcript="hi")
```
"""

from voice_call.models.artifact import AudioArtifact
from voice_call.models.conversation import (
    ConversationLog,
    Message,
    MessageRole,
    Turn,
    TurnRole,
)
from voice_call.models.message_schemas import (
    BaseMessage,
    CallEndedMessage,
    CallEndMessage,
    CallStartMessage,
    IncomingMessage,
    OutgoingMessage,
    RecognitionEndMessage,
    RecognitionErrorMessage,
    RecognitionResultMessage,
    RecognitionStartCommand,
    RecognitionStopCommand,
    RecordingChunkMessage,
    RecordingErrorMessage,
    RecordingReadyMessage,
    RecordingStartCommand,
    RecordingStartedMessage,
    RecordingStopCommand,
    RecordingStoppedMessage,
    StatusMessage,
    SynthesisCancelCommand,
    SynthesisEndMessage,
    SynthesisErrorMessage,
    SynthesisSpeakCommand,
    VoiceInfo,
    VoicesChangedMessage,
)
from voice_call.models.session_state import CallState, SessionState
