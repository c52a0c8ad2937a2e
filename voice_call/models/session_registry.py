"""
Registry of connected call sessions.

Each browser connection owns one SessionController. The registry maps the
session ID handed to the browser to its controller so the HTTP routes (for
example the recording download) can find it.
"""

from typing import Dict, Optional

from voice_call.call.session import SessionController


class SessionRegistry:
    """
    Tracks the session controllers of connected browsers.
    """

    def __init__(self):
        """Initialize an empty dictionary of active sessions."""
        self.active_sessions: Dict[str, SessionController] = {}

    def add_session(self, session_id: str, controller: SessionController):
        """
        Register the controller of a newly connected browser.

        Args:
            session_id: Unique identifier handed to the browser
            controller: The controller driving that browser's calls
        """
        self.active_sessions[session_id] = controller

    def get_session(self, session_id: str) -> Optional[SessionController]:
        """
        Get a session controller by its ID.

        Returns:
            The controller, or None if the session does not exist
        """
        return self.active_sessions.get(session_id)

    def remove_session(self, session_id: str):
        """
        Remove a session from the registry.

        Args:
            session_id: Unique identifier of the session to remove
        """
        self.active_sessions.pop(session_id, None)

    def get_all_sessions(self) -> Dict[str, SessionController]:
        return self.active_sessions

    def active_call_count(self) -> int:
        """Number of sessions with a call in progress."""
        return sum(
            1 for controller in self.active_sessions.values()
            if controller.state.is_call_active
        )
