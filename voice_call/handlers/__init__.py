"""
Handlers for the messages the browser sends over the call WebSocket.

Key components:
- call_handlers: call.start and call.end, which start and end calls.
- speech_handlers: recognition and synthesis callbacks, forwarded to the
  turn coordinator as events, and voice list updates.
- recording_handlers: recorder acknowledgements and recorded audio chunks.

Every handler takes the raw message dict and the SessionController of the
connection, validates the message against its pydantic model and logs
(without raising) when validation fails.

Usage examples:
```python
from voice_call.handlers import speech_handlers

await speech_handlers.handle_recognition_result(
    {"type": "recognition.result", "transcript": "hello"}, controller
)
```
"""

# Handlers module initialization
