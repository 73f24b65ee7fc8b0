from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from .model import Clip


class InvalidRangeError(ValueError):
    """Raised when a clip range is empty or inverted (start >= end)."""
    pass


def _check_range(start: float, end: float) -> None:
    if float(start) >= float(end):
        raise InvalidRangeError("Start time must be less than end time.")


def ranges_overlap(a: Clip, b: Clip) -> bool:
    """Half-open intersection test; touching endpoints do not overlap."""
    return not (a.end <= b.start or a.start >= b.end)


class ClipStore:
    """
    Ordered clip collection for a single media file.

    Clips are addressed by index; insertion order is display order and
    clips are never reordered or removed within a session.
    """

    def __init__(self, clips: Optional[List[Clip]] = None) -> None:
        self._clips: List[Clip] = list(clips or [])
        self.selection: Optional[int] = None

    def __len__(self) -> int:
        return len(self._clips)

    def __iter__(self) -> Iterator[Clip]:
        return iter(self._clips)

    def __getitem__(self, index: int) -> Clip:
        return self._clips[self._index(index)]

    @property
    def clips(self) -> List[Clip]:
        return list(self._clips)

    def _index(self, index: int) -> int:
        i = int(index)
        # Negative indices are not clip identities.
        if i < 0 or i >= len(self._clips):
            raise IndexError(f"clip index out of range: {index}")
        return i

    def add(self, start: float, end: float) -> int:
        _check_range(start, end)
        self._clips.append(Clip(start=float(start), end=float(end)))
        self.selection = None
        return len(self._clips) - 1

    def update(self, index: int, start: float, end: float) -> None:
        _check_range(start, end)
        i = self._index(index)
        self._clips[i] = Clip(start=float(start), end=float(end))
        self.selection = None

    def select(self, index: int) -> Tuple[float, float]:
        """Enter edit mode for a clip; returns its range to pre-fill the form."""
        i = self._index(index)
        self.selection = i
        c = self._clips[i]
        return c.start, c.end

    def clear_selection(self) -> None:
        self.selection = None

    def set_bounds(self, index: int, start: float, end: float) -> None:
        """
        Overwrite a clip's range in place without range validation.

        Callers (drag/resize) are responsible for keeping start < end.
        """
        c = self._clips[self._index(index)]
        c.start = float(start)
        c.end = float(end)

    def overlaps(self, index: int) -> bool:
        i = self._index(index)
        a = self._clips[i]
        return any(j != i and ranges_overlap(a, b) for j, b in enumerate(self._clips))

    def overlapping_indices(self) -> Set[int]:
        out: Set[int] = set()
        n = len(self._clips)
        for i in range(n):
            for j in range(i + 1, n):
                if ranges_overlap(self._clips[i], self._clips[j]):
                    out.add(i)
                    out.add(j)
        return out

    def to_payload(self) -> List[Dict[str, Any]]:
        return [c.to_dict() for c in self._clips]
