from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .timeaxis import TimeAxis
from .timeline import ClipStore

log = logging.getLogger(__name__)

EDGE_LEFT = "left"
EDGE_RIGHT = "right"
HIT_BODY = "body"

# Width of the resize handle drawn inside each clip edge.
DEFAULT_HANDLE_PX = 8.0

# Shortest clip a resize may produce, in seconds.
MIN_RESIZE_SEC = 1


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    index: int
    duration: float


@dataclass(frozen=True)
class Resizing:
    index: int
    edge: str  # "left" | "right"


InteractionState = Union[Idle, Dragging, Resizing]

IDLE = Idle()


class InteractionController:
    """
    Turns timeline pointer events into ClipStore mutations.

    Only one drag or resize can be active: both start from `Idle`, and any
    press received while another interaction is active is ignored. Pointer
    positions are x offsets relative to the timeline's left edge.
    """

    def __init__(self, store: ClipStore, axis: TimeAxis) -> None:
        self.store = store
        self.axis = axis
        self.state: InteractionState = IDLE

    @property
    def is_idle(self) -> bool:
        return isinstance(self.state, Idle)

    def hit_test(self, pointer_x: float, handle_px: float = DEFAULT_HANDLE_PX) -> Optional[Tuple[int, str]]:
        """
        Find what a press at `pointer_x` lands on.

        Returns (index, "body" | "left" | "right") or None. Later clips are drawn
        on top, so they win; edge handles take precedence over the body. Handles
        shrink to a quarter of the clip width each, so a body region always remains.
        """
        x = float(pointer_x)
        max_hw = max(0.0, float(handle_px))
        for i in range(len(self.store) - 1, -1, -1):
            c = self.store[i]
            left = self.axis.pixels_from_time(c.start)
            right = self.axis.pixels_from_time(c.end)
            if x < left or x > right:
                continue
            hw = min(max_hw, (right - left) / 4.0)
            if x <= left + hw:
                return i, EDGE_LEFT
            if x >= right - hw:
                return i, EDGE_RIGHT
            return i, HIT_BODY
        return None

    def press_at(self, pointer_x: float, handle_px: float = DEFAULT_HANDLE_PX) -> bool:
        """Start a drag or resize from a press position; False if nothing was hit."""
        hit = self.hit_test(pointer_x, handle_px)
        if hit is None:
            return False
        index, kind = hit
        if kind == HIT_BODY:
            return self.press_body(index)
        return self.press_edge(index, kind)

    def press_body(self, index: int) -> bool:
        if not self.is_idle:
            return False
        try:
            clip = self.store[index]
        except IndexError:
            log.warning("drag ignored: no clip at index %s", index)
            return False
        self.state = Dragging(index=int(index), duration=clip.dur)
        return True

    def press_edge(self, index: int, edge: str) -> bool:
        if not self.is_idle:
            return False
        e = str(edge or "").strip().lower()
        if e not in (EDGE_LEFT, EDGE_RIGHT):
            raise ValueError(f"Unknown resize edge: {edge}")
        try:
            self.store[index]
        except IndexError:
            log.warning("resize ignored: no clip at index %s", index)
            return False
        self.state = Resizing(index=int(index), edge=e)
        return True

    def move(self, pointer_x: float) -> None:
        st = self.state
        if isinstance(st, Idle):
            return
        t = self.axis.time_from_pixels(pointer_x)
        try:
            clip = self.store[st.index]
        except IndexError:
            log.warning("pointer move ignored: clip %s no longer exists", st.index)
            return

        if isinstance(st, Dragging):
            self.store.set_bounds(st.index, t, t + st.duration)
        elif st.edge == EDGE_LEFT:
            self.store.set_bounds(st.index, max(0, min(t, clip.end - MIN_RESIZE_SEC)), clip.end)
        else:
            self.store.set_bounds(st.index, clip.start, max(t, clip.start + MIN_RESIZE_SEC))

    def release(self) -> None:
        # Releases end the interaction wherever they happen, keeping the last position.
        self.state = IDLE

    def double_activate(self, index: int) -> Optional[Tuple[float, float]]:
        """Select a clip for editing; independent of any active drag."""
        try:
            return self.store.select(index)
        except IndexError:
            log.warning("select ignored: no clip at index %s", index)
            return None
