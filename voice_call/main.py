"""
FastAPI server for the browser voice call agent.

This module initializes and configures the FastAPI application that the call
page connects to. The browser keeps the platform speech recognition, speech
synthesis and media recorder; the server drives them over the ``/ws``
WebSocket, talks to the assistant backend, and serves the finished call
recording for download.
"""

from fastapi import FastAPI, HTTPException, WebSocket
from fastapi.responses import Response

from voice_call.config.logging_config import configure_logging
from voice_call.config.settings import get_settings
from voice_call.services.backend_client import BackendClient
from voice_call.websocket_manager import WebSocketManager

settings = get_settings()

# Configure logging
logger = configure_logging(settings.log_level)

# Create FastAPI application
app = FastAPI(
    title="Voice Call Agent",
    description="Phone-style voice conversations with an assistant backend",
    version="1.0.0",
)

backend = BackendClient(settings.backend_api_base)

# Create WebSocket manager
websocket_manager = WebSocketManager(backend, timings=settings.timings)


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint for the browser call client.

    Each connection gets its own call session. The browser reports speech
    recognition, synthesis and recorder events; the server answers with
    commands and status updates.
    """
    await websocket_manager.handle_websocket(websocket)


@app.get("/recordings/{session_id}")
async def download_recording(session_id: str):
    """Download the recording of the last finished call of a session.

    Raises:
        HTTPException: 404 if the session is unknown or has no finished recording
    """
    controller = websocket_manager.session_registry.get_session(session_id)
    if controller is None or controller.artifact is None:
        raise HTTPException(status_code=404, detail="Recording not found")

    artifact = controller.artifact
    return Response(
        content=artifact.data,
        media_type=artifact.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{artifact.filename}"'},
    )


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring system status.

    Returns:
        dict: Status information indicating the server is operational.
    """
    registry = websocket_manager.session_registry
    return {
        "status": "healthy",
        "backend_api_base": backend.api_base,
        "connected_sessions": len(registry.get_all_sessions()),
        "active_calls": registry.active_call_count(),
    }


@app.get("/")
async def root():
    """Root endpoint to display basic information about the API.

    Returns:
        dict: Basic information about the API and its purpose.
    """
    return {
        "name": "Voice Call Agent",
        "description": "Phone-style voice conversations with an assistant backend",
        "version": "1.0.0",
        "endpoints": {
            "/ws": "WebSocket endpoint for the browser call client",
            "/recordings/{session_id}": "Download the last call recording",
            "/health": "Health check endpoint",
        },
    }


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting server on http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)
