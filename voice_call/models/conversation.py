"""
Conversation record for a single voice call.

This module provides the Turn and Message models and the ConversationLog,
which keeps the chronological transcript of a call together with the message
history sent to the chat backend. The log is append-only; insertion order is
the order utterances were produced.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TurnRole(str, Enum):
    """Who produced a turn in the transcript."""

    USER = "user"
    AGENT = "agent"


class MessageRole(str, Enum):
    """Role of a message in the chat backend history."""

    USER = "user"
    ASSISTANT = "assistant"


SPEAKER_LABELS: Dict[TurnRole, str] = {
    TurnRole.USER: "You",
    TurnRole.AGENT: "Agent",
}


class Turn(BaseModel):
    """One utterance in the transcript. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    role: TurnRole = Field(..., description="Speaker of the utterance")
    text: str = Field(..., description="Recognized or synthesized text")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the turn was appended",
    )

    @field_validator("text")
    def validate_text(cls, v):
        """Validate that turn text is not blank."""
        if not v.strip():
            raise ValueError("Turn text cannot be empty")
        return v

    @property
    def speaker(self) -> str:
        return SPEAKER_LABELS[self.role]

    def as_transcript_line(self) -> str:
        return f"{self.speaker}: {self.text}"


class Message(BaseModel):
    """A chat backend message: the role/content pair sent as context."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    role: MessageRole
    content: str


class ConversationLog:
    """
    Ordered, append-only record of a call.

    Holds the transcript turns used for the post-call summary and the message
    history used as context for every chat exchange. Both are cleared only
    when a new call starts.
    """

    def __init__(self):
        self._turns: List[Turn] = []
        self._messages: List[Message] = []

    def add_user_turn(self, text: str) -> Turn:
        """
        Append a user utterance to the transcript.

        Args:
            text: The recognized utterance

        Returns:
            The appended Turn
        """
        turn = Turn(role=TurnRole.USER, text=text)
        self._turns.append(turn)
        return turn

    def add_agent_turn(self, text: str) -> Turn:
        """
        Append an agent utterance to the transcript.

        Args:
            text: The assistant reply that was spoken (or ended the call)

        Returns:
            The appended Turn
        """
        turn = Turn(role=TurnRole.AGENT, text=text)
        self._turns.append(turn)
        return turn

    def add_message(self, role: MessageRole, content: str) -> Message:
        message = Message(role=role, content=content)
        self._messages.append(message)
        return message

    @property
    def turns(self) -> List[Turn]:
        """A copy of the transcript turns in chronological order."""
        return list(self._turns)

    @property
    def messages(self) -> List[Message]:
        """A copy of the chat history in the order it was exchanged."""
        return list(self._messages)

    def transcript(self) -> str:
        """
        Build the transcript text.

        Each turn becomes a ``"<Speaker>: <text>"`` line where the speaker is
        "You" for the user and "Agent" for the assistant; lines are separated
        by a blank line.
        """
        return "\n\n".join(turn.as_transcript_line() for turn in self._turns)

    def clear(self) -> None:
        self._turns.clear()
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._turns)
