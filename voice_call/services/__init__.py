"""
Services module for external integrations of the voice call agent.

Key components:
- backend_client: HTTP client for the chat, summary and email endpoints of
  the assistant backend.
- client_channel: Outgoing side of the browser WebSocket, serializing
  command models for the browser.
"""

# Services module initialization
