"""
Voice Call Agent - browser voice calls with an assistant backend

This application lets a caller hold a phone-style conversation with an
assistant from a web page. The browser provides speech recognition, speech
synthesis and call recording; this server runs the call state machine that
decides when to listen, when to ask the assistant backend and when to speak.

Architecture Overview:
- FastAPI server exposing a WebSocket endpoint for the browser call client
- Turn coordinator: an event-driven state machine (listening, thinking,
  speaking) that never lets recognition and synthesis overlap
- Session controller: call start/end, recording, transcript, summary and
  email delivery
- HTTP client for the assistant backend's chat, summary and email endpoints

Key Components:
- call: Turn coordinator, coordinator events and session controller
- config: Application-wide constants, settings and logging setup
- handlers: Handlers for the messages the browser sends
- models: Conversation log, session state, recording artifact and message schemas
- recording: Call recording lifecycle
- services: Backend HTTP client and the outgoing browser channel
- speech: Speech recognition and synthesis wrappers, voice selection
- websocket_manager: Connection handling and message routing

Getting Started:
1. Set up environment variables (or a .env file):
   - BACKEND_API_BASE: Base URL of the assistant backend
   - PORT: Port to run the server on (default 8000)
   - HOST: Host to bind the server to (default 0.0.0.0)
   - LOG_LEVEL: Logging level (default INFO)

2. Start the server:
   ```bash
   python run.py
   ```

3. Point the call page at ws://your-server:8000/ws
"""
