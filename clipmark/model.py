from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional


@dataclass
class Clip:
    """
    Marked range of the loaded media, in seconds.

    Attributes:
        start/end: half-open interval [start, end) within the source media
    """

    start: float
    end: float

    @property
    def dur(self) -> float:
        return self.end - self.start

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MediaRef:
    """Identifiers handed back by the upload backend."""

    url: str
    filename: str
    thumbnails: List[str] = field(default_factory=list)


@dataclass
class EditorState:
    """
    Per-session editor state.

    Notes:
        - `media` is set once by a successful upload and never replaced by a failed one.
        - `current_time` is written only by the playback tracker.
    """

    media: Optional[MediaRef] = None
    current_time: float = 0.0
    uploading: bool = False
    exporting: bool = False

    @property
    def media_url(self) -> Optional[str]:
        return self.media.url if self.media else None

    @property
    def media_filename(self) -> Optional[str]:
        return self.media.filename if self.media else None

    @property
    def thumbnails(self) -> List[str]:
        return list(self.media.thumbnails) if self.media else []
