"""
HTTP client for the assistant backend.

The backend exposes three endpoints that are treated as opaque services:

- ``POST /api/chat``: conversation history in, next assistant utterance out
- ``POST /api/summary``: transcript in, summary out
- ``POST /api/email``: transcript, summary and optional recording delivered
  by email

Requests are made with ``requests`` in a worker thread so the event loop
keeps processing browser events while a request is in flight. No timeout is
applied; a hung request keeps the call waiting until it resolves or fails.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import requests

from voice_call.config.constants import (
    LOGGER_NAME,
    SUMMARY_MISSING,
    TRANSCRIPT_MISSING,
)
from voice_call.exceptions import BackendError
from voice_call.models.artifact import AudioArtifact
from voice_call.models.conversation import Message

logger = logging.getLogger(LOGGER_NAME)


class BackendClient:
    """
    Client for the chat, summary and email endpoints.

    Every method raises BackendError on network failures, non-2xx responses
    and undecodable bodies.
    """

    def __init__(self, api_base: str):
        """
        Args:
            api_base: Base URL of the backend, e.g. ``https://agent.example.com``
        """
        self.api_base = api_base.rstrip("/")

    def _url(self, path: str) -> str:
        return f"{self.api_base}{path}"

    async def _post(self, endpoint: str, **kwargs) -> requests.Response:
        try:
            response = await asyncio.to_thread(
                requests.post, self._url(f"/api/{endpoint}"), **kwargs
            )
        except requests.RequestException as e:
            logger.error(f"Request to {endpoint} endpoint failed: {e}")
            raise BackendError(endpoint, f"request failed: {e}") from e
        return response

    @staticmethod
    def _json(endpoint: str, response: requests.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise BackendError(
                endpoint, "invalid JSON in response", response.status_code
            ) from e
        if not isinstance(data, dict):
            raise BackendError(
                endpoint, "unexpected response body", response.status_code
            )
        return data

    async def chat(self, messages: List[Message]) -> str:
        """
        Request the next assistant utterance.

        Args:
            messages: Conversation history in chronological order

        Returns:
            The assistant text, or an empty string if the backend sent none
        """
        payload = {"messages": [message.model_dump() for message in messages]}
        response = await self._post("chat", json=payload)
        if not response.ok:
            logger.error(f"Chat endpoint returned {response.status_code}")
            raise BackendError("chat", "chat failed", response.status_code)
        data = self._json("chat", response)
        return data.get("assistant") or ""

    async def summarize(self, transcript: str) -> str:
        """
        Request a summary of the call transcript.

        Args:
            transcript: The full transcript text

        Returns:
            The summary text, or an empty string if the backend sent none
        """
        response = await self._post("summary", json={"transcript": transcript})
        if not response.ok:
            logger.error(f"Summary endpoint returned {response.status_code}")
            raise BackendError(
                "summary", "summary endpoint failed", response.status_code
            )
        data = self._json("summary", response)
        return data.get("summary") or ""

    async def send_email(
        self,
        transcript: str,
        summary: str,
        artifact: Optional[AudioArtifact] = None,
    ) -> Dict[str, Any]:
        """
        Deliver the call results by email.

        Args:
            transcript: Transcript text
            summary: Summary text
            artifact: The call recording, attached when present

        Returns:
            The decoded JSON response of the email endpoint
        """
        form = {
            "transcript": transcript or TRANSCRIPT_MISSING,
            "summary": summary or SUMMARY_MISSING,
        }
        files = None
        if artifact is not None:
            files = {
                "recording": (artifact.filename, artifact.data, artifact.mime_type)
            }

        response = await self._post("email", data=form, files=files)
        if not response.ok:
            try:
                error = response.json().get("error")
            except (ValueError, AttributeError):
                error = None
            message = error or "Email endpoint failed"
            logger.error(f"Email endpoint returned {response.status_code}: {message}")
            raise BackendError("email", message, response.status_code)
        return self._json("email", response)
