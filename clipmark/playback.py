from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional, Protocol, Set

from .timeaxis import TimeAxis

log = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SEC = 0.5


class Player(Protocol):
    """Playback capability the tracker drives (e.g. a video control adapter)."""

    async def get_current_time(self) -> Optional[float]:
        """Current position in seconds, or None while the player cannot tell."""
        ...

    async def seek_to(self, time: float, unit: str = "seconds") -> None:
        ...


def position_to_seconds(raw: Any) -> Optional[float]:
    """
    Normalize a player-reported position to seconds.

    Accepts duration-like objects exposing `in_milliseconds`, or plain
    int/float milliseconds. Anything else is treated as unknown.
    """
    if raw is None:
        return None
    try:
        if hasattr(raw, "in_milliseconds"):
            return max(0.0, float(raw.in_milliseconds) / 1000.0)
        if isinstance(raw, bool):
            return None
        if isinstance(raw, (int, float)):
            return max(0.0, float(raw) / 1000.0)
    except (TypeError, ValueError):
        return None
    return None


class PlaybackTracker:
    """
    Polls the player on the running event loop and mirrors its position.

    `current_time` is only written here. A reading of None never updates it;
    with `zero_is_unknown` (the default) a reading of 0 is ignored too, since
    some players report 0 before they have loaded anything.
    """

    def __init__(
        self,
        player: Optional[Player] = None,
        axis: Optional[TimeAxis] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SEC,
        zero_is_unknown: bool = True,
        on_change: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.player = player
        self.axis = axis or TimeAxis()
        self.poll_interval = max(0.01, float(poll_interval))
        self.zero_is_unknown = bool(zero_is_unknown)
        self.on_change = on_change
        self.current_time: float = 0.0
        self._task: Optional[asyncio.Task] = None
        self._pending: Set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def cursor_px(self) -> float:
        return self.axis.pixels_from_time(self.current_time)

    async def poll_once(self) -> bool:
        """Read the player once; returns True when `current_time` changed."""
        if self.player is None:
            return False
        try:
            t = await self.player.get_current_time()
        except Exception as ex:
            log.debug("player position unavailable: %s", ex)
            return False
        if t is None:
            return False
        if not t and self.zero_is_unknown:
            return False
        t = max(0.0, float(t))
        if t == self.current_time:
            return False
        self.current_time = t
        if self.on_change is not None:
            self.on_change(t)
        return True

    async def _loop(self) -> None:
        while True:
            try:
                await self.poll_once()
            except Exception as ex:
                log.exception("playback poll failed: %s", ex)
            await asyncio.sleep(self.poll_interval)

    def start(self) -> None:
        """Start polling on the running loop; no-op if already running."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop())

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def seek(self, time: float) -> None:
        """Ask the player to seek; returns immediately."""
        if self.player is None:
            return
        task = asyncio.get_running_loop().create_task(self._seek(max(0.0, float(time))))
        # Keep a reference until the seek completes.
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _seek(self, time: float) -> None:
        try:
            await self.player.seek_to(time, "seconds")
        except Exception as ex:
            log.warning("seek to %.2fs failed: %s", time, ex)
