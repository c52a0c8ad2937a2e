"""
Synthesis voice selection.
"""

import re
from typing import List, Optional

from voice_call.models.message_schemas import VoiceInfo

PREFERRED_VOICE_PATTERN = re.compile(
    r"natural|female|google|microsoft|premium|samantha|eva|joanna", re.IGNORECASE
)


def _is_english(voice: VoiceInfo) -> bool:
    return voice.lang.lower().startswith("en")


def select_voice(voices: List[VoiceInfo]) -> Optional[VoiceInfo]:
    """
    Pick the voice to speak with.

    Preference order: a voice whose name suggests a natural or high quality
    voice, an English cloud voice, any English voice, the first voice.

    Args:
        voices: Voices reported by the browser

    Returns:
        The chosen voice, or None when the list is empty (browser default)
    """
    for predicate in (
        lambda v: PREFERRED_VOICE_PATTERN.search(v.name) is not None,
        lambda v: _is_english(v) and not v.localService,
        _is_english,
    ):
        for voice in voices:
            if predicate(voice):
                return voice
    return voices[0] if voices else None
