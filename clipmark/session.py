from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

from .backend import BackendClient, NetworkError
from .config import ConfigStore
from .interaction import InteractionController, InteractionState
from .model import EditorState, MediaRef
from .playback import Player, PlaybackTracker
from .timeaxis import TimeAxis
from .timeline import ClipStore, InvalidRangeError

log = logging.getLogger(__name__)

MSG_UPLOAD_FAILED = "Upload failed."
MSG_EXPORT_FAILED = "Export failed."
MSG_EXPORTED = "Exported successfully!"
MSG_NEED_MEDIA_AND_CLIPS = "Upload a video and add clips."


def _log_notify(msg: str) -> None:
    log.info("notify: %s", msg)


class EditorSession:
    """
    One editing session over one uploaded video.

    Owns the clip store, the pointer interaction controller and the playback
    tracker, and talks to the media backend. Failures never raise out of the
    public coroutines: they are reported through `notify` and leave the
    in-memory state as it was, so the user can retry.
    """

    def __init__(
        self,
        backend: BackendClient,
        player: Optional[Player] = None,
        axis: Optional[TimeAxis] = None,
        poll_interval: float = 0.5,
        notify: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.backend = backend
        self.axis = axis or TimeAxis()
        self.state = EditorState()
        self.store = ClipStore()
        self.controller = InteractionController(self.store, self.axis)
        self.tracker = PlaybackTracker(
            player=player,
            axis=self.axis,
            poll_interval=poll_interval,
            on_change=self._on_playback_time,
        )
        self.notify = notify or _log_notify
        self.on_time_change: Optional[Callable[[float], None]] = None

    @staticmethod
    def from_config(
        cfg: ConfigStore,
        player: Optional[Player] = None,
        notify: Optional[Callable[[str], None]] = None,
    ) -> "EditorSession":
        backend = BackendClient(cfg.backend_url(), timeout=cfg.request_timeout_sec())
        return EditorSession(
            backend,
            player=player,
            axis=TimeAxis(cfg.pixels_per_second()),
            poll_interval=cfg.poll_interval_sec(),
            notify=notify,
        )

    def _on_playback_time(self, t: float) -> None:
        self.state.current_time = t
        if self.on_time_change is not None:
            self.on_time_change(t)

    @property
    def selection(self) -> Optional[int]:
        return self.store.selection

    @property
    def interaction(self) -> InteractionState:
        return self.controller.state

    @property
    def has_media(self) -> bool:
        return self.state.media is not None

    # ---------- Media ----------
    async def upload_media(self, path: str) -> bool:
        if self.state.uploading:
            log.info("upload already in progress; ignoring %s", path)
            return False
        self.state.uploading = True
        try:
            uploaded = await self.backend.upload(path)
            thumbnails = await self.backend.fetch_thumbnails(uploaded.filename)
        except NetworkError as ex:
            log.exception("upload failed: %s", ex)
            self.notify(MSG_UPLOAD_FAILED)
            return False
        finally:
            self.state.uploading = False

        self.state.media = MediaRef(url=uploaded.url, filename=uploaded.filename, thumbnails=thumbnails)
        log.info("loaded %s (%d thumbnails)", uploaded.filename, len(thumbnails))
        return True

    async def export_clips(self) -> bool:
        filename = self.state.media_filename
        if not filename or len(self.store) == 0:
            self.notify(MSG_NEED_MEDIA_AND_CLIPS)
            return False
        if self.state.exporting:
            log.info("export already in progress")
            return False
        self.state.exporting = True
        try:
            await self.backend.export(filename, self.store.to_payload())
        except NetworkError as ex:
            log.exception("export failed: %s", ex)
            self.notify(MSG_EXPORT_FAILED)
            return False
        finally:
            self.state.exporting = False

        self.notify(MSG_EXPORTED)
        return True

    # ---------- Clip form ----------
    def submit_range(self, start: float, end: float) -> bool:
        """Add a clip, or update the selected one when editing."""
        try:
            if self.store.selection is None:
                self.store.add(start, end)
            else:
                self.store.update(self.store.selection, start, end)
        except InvalidRangeError as ex:
            self.notify(str(ex))
            return False
        except IndexError as ex:
            log.warning("update ignored: %s", ex)
            self.store.clear_selection()
            return False
        return True

    def edit_clip(self, index: int) -> Optional[Tuple[float, float]]:
        return self.controller.double_activate(index)

    def cancel_edit(self) -> None:
        self.store.clear_selection()

    # ---------- Playback ----------
    def play_clip(self, index: int) -> None:
        try:
            clip = self.store[index]
        except IndexError:
            log.warning("play ignored: no clip at index %s", index)
            return
        self.tracker.seek(clip.start)

    @property
    def cursor_px(self) -> float:
        return self.axis.pixels_from_time(self.state.current_time)
