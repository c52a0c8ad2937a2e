"""
Speech synthesis wrapper.
"""

import logging
from typing import List, Optional

from voice_call.config import constants
from voice_call.config.constants import LOGGER_NAME
from voice_call.models.message_schemas import (
    SynthesisCancelCommand,
    SynthesisSpeakCommand,
    VoiceInfo,
)
from voice_call.services.client_channel import ClientChannel
from voice_call.speech.voices import select_voice

logger = logging.getLogger(LOGGER_NAME)


class VoiceOutput:
    """
    Asks the browser to speak text.

    Completion and failure are reported later by the browser as
    synthesis.end and synthesis.error events.
    """

    def __init__(
        self,
        channel: ClientChannel,
        rate: float = constants.SYNTHESIS_RATE,
        pitch: float = constants.SYNTHESIS_PITCH,
        volume: float = constants.SYNTHESIS_VOLUME,
    ):
        self.channel = channel
        self.rate = rate
        self.pitch = pitch
        self.volume = volume
        self.selected_voice: Optional[VoiceInfo] = None

    def update_voices(self, voices: List[VoiceInfo]) -> Optional[VoiceInfo]:
        """Re-select the preferred voice from a fresh voice list."""
        self.selected_voice = select_voice(voices)
        if self.selected_voice:
            logger.info(
                f"Selected voice: {self.selected_voice.name} ({self.selected_voice.lang or '?'})"
            )
        else:
            logger.info("No voices reported, using browser default voice")
        return self.selected_voice

    async def speak(self, text: str) -> None:
        """
        Ask the browser to speak text with the selected voice.

        Args:
            text: Non-empty text to speak
        """
        command = SynthesisSpeakCommand(
            text=text,
            voice=self.selected_voice.name if self.selected_voice else None,
            rate=self.rate,
            pitch=self.pitch,
            volume=self.volume,
        )
        await self.channel.send(command)
        logger.debug(f"Speak requested ({len(text)} chars)")

    async def cancel(self) -> None:
        """Stop any utterance being spoken."""
        await self.channel.send(SynthesisCancelCommand())
