"""
Constants and configuration values used throughout the application.

This module defines constants that are used across different parts of the application,
providing a centralized location for configuration values and making it easier to
maintain consistent naming throughout the codebase.
"""

# Logger name used throughout the application
LOGGER_NAME = "voice_call"

# Default backend base URL for chat, summary and email endpoints
DEFAULT_BACKEND_API_BASE = "http://localhost:3001"

# Assistant replies containing any of these end the call (case-insensitive)
TERMINATION_PHRASES = ("goodbye", "end call", "hang up", "terminate")

# Synthetic instruction used to open the conversation
GREETING_PROMPT = "Start the conversation with a greeting."

# Delays in seconds
SETTLE_DELAY = 0.4  # after synthesis ends, before listening again
RECOGNITION_END_DELAY = 0.4
NO_SPEECH_DELAY = 0.6
START_RETRY_DELAY = 0.8
RECOGNITION_ERROR_DELAY = 1.0
EXCHANGE_RETRY_DELAY = 1.2
RECORDING_ACK_TIMEOUT = 10.0

# Speech recognition configuration
RECOGNITION_LANG = "en-US"
RECOGNITION_CONTINUOUS = True
RECOGNITION_INTERIM_RESULTS = False
RECOGNITION_MAX_ALTERNATIVES = 3

# Speech synthesis parameters
SYNTHESIS_RATE = 1.05
SYNTHESIS_PITCH = 1.0
SYNTHESIS_VOLUME = 1.0

# Recording artifact
RECORDING_MIME_TYPE = "audio/webm"
RECORDING_FILENAME = "call.webm"

# Recognition error codes reported by the browser
RECOGNITION_ERROR_NO_SPEECH = "no-speech"
RECOGNITION_ERROR_START_FAILED = "start-failed"
RECOGNITION_PERMISSION_ERRORS = ("not-allowed", "permission-denied")
RECOGNITION_ERROR_SERVICE_NOT_ALLOWED = "service-not-allowed"

# Summary and delivery placeholders
SUMMARY_EMPTY = "No summary was generated"
SUMMARY_FAILED = "Could not create summary"
TRANSCRIPT_MISSING = "No transcript available"
SUMMARY_MISSING = "No summary available"

# Status texts shown to the caller
STATUS_READY = "Ready to start"
STATUS_STARTING = "Starting call..."
STATUS_LISTENING = "Listening..."
STATUS_THINKING = "Thinking..."
STATUS_SPEAKING = "Speaking..."
STATUS_CALL_ENDED = "Call ended"
STATUS_CONNECTION_ERROR = "Connection error, please try again"
STATUS_GREETING_FAILED = "Failed to connect to server"
STATUS_MIC_UNAVAILABLE = "Couldn't access microphone. Please allow permission."
STATUS_RECOGNITION_UNSUPPORTED = "Voice recognition not supported in this browser"
STATUS_MIC_PERMISSION_DENIED = "Microphone permission denied"
STATUS_SPEECH_SERVICE_UNAVAILABLE = "Speech service not available on this device"
STATUS_SENDING = "Creating summary • Sending email..."
STATUS_EMAIL_SENT = "Email sent successfully"
STATUS_EMAIL_FAILED = "Could not send email"

# Incoming message types (browser -> server)
MESSAGE_TYPE_CALL_START = "call.start"
MESSAGE_TYPE_CALL_END = "call.end"
MESSAGE_TYPE_RECOGNITION_RESULT = "recognition.result"
MESSAGE_TYPE_RECOGNITION_END = "recognition.end"
MESSAGE_TYPE_RECOGNITION_ERROR = "recognition.error"
MESSAGE_TYPE_SYNTHESIS_END = "synthesis.end"
MESSAGE_TYPE_SYNTHESIS_ERROR = "synthesis.error"
MESSAGE_TYPE_VOICES_CHANGED = "voices.changed"
MESSAGE_TYPE_RECORDING_STARTED = "recording.started"
MESSAGE_TYPE_RECORDING_CHUNK = "recording.chunk"
MESSAGE_TYPE_RECORDING_STOPPED = "recording.stopped"
MESSAGE_TYPE_RECORDING_ERROR = "recording.error"

# Outgoing message types (server -> browser)
MESSAGE_TYPE_STATUS = "status"
MESSAGE_TYPE_RECOGNITION_START = "recognition.start"
MESSAGE_TYPE_RECOGNITION_STOP = "recognition.stop"
MESSAGE_TYPE_SYNTHESIS_SPEAK = "synthesis.speak"
MESSAGE_TYPE_SYNTHESIS_CANCEL = "synthesis.cancel"
MESSAGE_TYPE_RECORDING_START = "recording.start"
MESSAGE_TYPE_RECORDING_STOP = "recording.stop"
MESSAGE_TYPE_RECORDING_READY = "recording.ready"
MESSAGE_TYPE_CALL_ENDED = "call.ended"
