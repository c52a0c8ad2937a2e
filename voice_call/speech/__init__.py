"""
Speech module wrapping the browser's speech services.

Key components:
- capture: VoiceCapture, which starts and stops browser speech recognition.
- output: VoiceOutput, which asks the browser to speak text.
- voices: Preferred synthesis voice selection.

Neither wrapper decides when it may run. The turn coordinator alone keeps
recognition and synthesis from overlapping; recognition results, ends and
errors come back as browser events routed to the coordinator.
"""

from voice_call.speech.capture import VoiceCapture
from voice_call.speech.output import VoiceOutput
from voice_call.speech.voices import select_voice

__all__ = ["VoiceCapture", "VoiceOutput", "select_voice"]
