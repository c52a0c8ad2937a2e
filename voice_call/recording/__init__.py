"""
Recording module for the call audio.

The browser records the call and streams the recorded chunks; the
AudioRecorder acquires the recorder, buffers the chunks and finalizes them
into a single AudioArtifact when the call ends.
"""

from voice_call.recording.recorder import AudioRecorder

__all__ = ["AudioRecorder"]
