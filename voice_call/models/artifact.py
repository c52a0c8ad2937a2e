"""
Finished call recording.
"""

from pydantic import BaseModel, ConfigDict, Field

from voice_call.config.constants import RECORDING_FILENAME, RECORDING_MIME_TYPE


class AudioArtifact(BaseModel):
    """All recorded chunks of a call joined into one downloadable object."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., repr=False)
    mime_type: str = RECORDING_MIME_TYPE
    filename: str = RECORDING_FILENAME

    @property
    def size(self) -> int:
        return len(self.data)
