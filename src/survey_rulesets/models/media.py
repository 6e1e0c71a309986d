"""Media blob model returned by media stores."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, NonNegativeInt


class MediaBlob(BaseModel):
    """Metadata of one stored media item.

    ``width``/``height`` (pixels) and ``duration_ms`` are only known when
    the store recorded them; prompts treat a missing measurement as
    unknown, never as zero.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    content_type: str
    size: NonNegativeInt = 0
    width: Optional[NonNegativeInt] = None
    height: Optional[NonNegativeInt] = None
    duration_ms: Optional[NonNegativeInt] = None

    @property
    def media_kind(self) -> str:
        """Top-level MIME type, e.g. ``image`` for ``image/jpeg``."""
        return self.content_type.split("/", 1)[0].lower()
