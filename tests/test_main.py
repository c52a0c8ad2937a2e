import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock, patch

from conftest import FakeChannel
from voice_call.main import app, websocket_manager
from voice_call.models.artifact import AudioArtifact

client = TestClient(app)


def test_health_check():
    """Test the health check endpoint returns correct response"""
    response = client.get("/health")
    assert response.status_code == 200

    response_json = response.json()
    assert response_json["status"] == "healthy"
    assert "backend_api_base" in response_json
    assert response_json["connected_sessions"] == 0
    assert response_json["active_calls"] == 0


def test_root_endpoint():
    """Test the root endpoint returns the correct API information"""
    response = client.get("/")
    assert response.status_code == 200

    response_json = response.json()
    assert response_json["name"] == "Voice Call Agent"
    assert response_json["version"] == "1.0.0"
    assert "/ws" in response_json["endpoints"]
    assert "/health" in response_json["endpoints"]


def test_unknown_recording():
    response = client.get("/recordings/does-not-exist")
    assert response.status_code == 404
    assert response.json()["detail"] == "Recording not found"


def test_recording_download():
    controller = websocket_manager.create_session("sid", FakeChannel())
    controller.recorder.artifact = AudioArtifact(data=b"webm-bytes")
    try:
        response = client.get("/recordings/sid")
    finally:
        websocket_manager.session_registry.remove_session("sid")

    assert response.status_code == 200
    assert response.content == b"webm-bytes"
    assert response.headers["content-type"].startswith("audio/webm")
    assert 'filename="call.webm"' in response.headers["content-disposition"]


def test_recording_not_ready_before_call_ends():
    websocket_manager.create_session("sid", FakeChannel())
    try:
        response = client.get("/recordings/sid")
    finally:
        websocket_manager.session_registry.remove_session("sid")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_websocket_endpoint():
    """Test that websocket endpoint calls the handle_websocket method"""
    with patch("voice_call.websocket_manager.WebSocketManager.handle_websocket") as mock_handle:
        mock_handle.return_value = None
        mock_websocket = MagicMock()

        websocket_route = next(route for route in app.routes if route.path == "/ws")
        await websocket_route.endpoint(mock_websocket)

        mock_handle.assert_called_once_with(mock_websocket)
