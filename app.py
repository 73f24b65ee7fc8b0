from __future__ import annotations

import logging
from typing import Optional

import flet as ft
import flet_video as ftv

from clipmark.config import ConfigStore
from clipmark.playback import position_to_seconds
from clipmark.session import EditorSession
from clipmark.shortcuts import (
    ACTION_CANCEL,
    ACTION_EXPORT,
    ACTION_PLAY_SELECTED,
    ACTION_SHOW_SHORTCUTS,
    ACTION_SUBMIT_RANGE,
    ACTION_UPLOAD,
    resolve_shortcut_action,
    shortcut_legend,
)

logging.basicConfig(level=logging.INFO)
log = logging.getLogger("clipmark")

THUMB_W = 100
CLIP_LANE_H = 48


class FletVideoPlayer:
    """Adapts a flet-video control to the playback tracker's player interface."""

    def __init__(self) -> None:
        self.video: Optional[ftv.Video] = None

    def load(self, src: str) -> ftv.Video:
        if self.video is None:
            self.video = ftv.Video(
                expand=True,
                playlist=[ftv.VideoMedia(src)],
                autoplay=False,
                show_controls=True,
            )
        else:
            self.video.playlist = [ftv.VideoMedia(src)]
        return self.video

    async def get_current_time(self) -> Optional[float]:
        if self.video is None:
            return None
        return position_to_seconds(await self.video.get_current_position())

    async def seek_to(self, time: float, unit: str = "seconds") -> None:
        if self.video is None:
            return
        ms = int(float(time) * 1000) if unit == "seconds" else int(time)
        await self.video.seek(ms)


def _event_local_x(e) -> float:
    try:
        return float(e.local_position.x)
    except Exception:
        pass
    try:
        return float(getattr(e, "local_x", 0.0) or 0.0)
    except Exception:
        return 0.0


def _event_global_x(e) -> Optional[float]:
    try:
        return float(e.global_position.x)
    except Exception:
        pass
    try:
        return float(getattr(e, "global_x", None))
    except Exception:
        return None


def _parse_seconds(raw: Optional[str]) -> Optional[float]:
    try:
        return float(str(raw or "").strip())
    except ValueError:
        return None


def main(page: ft.Page) -> None:
    page.title = "ClipMark"
    page.theme_mode = ft.ThemeMode.DARK
    page.padding = 16

    cfg = ConfigStore.default()
    player = FletVideoPlayer()

    def snack(msg: str) -> None:
        # SnackBar is a DialogControl in newer Flet versions.
        page.show_dialog(ft.SnackBar(ft.Text(msg)))

    session = EditorSession.from_config(cfg, player=player, notify=snack)
    axis = session.axis
    typing_focus = False
    pan_start_local_x = 0.0
    pan_start_global_x = 0.0

    file_picker = ft.FilePicker()
    status = ft.Text("", color=ft.Colors.YELLOW_400)
    video_slot = ft.Container(height=360, border_radius=8, visible=False)
    thumbs_row = ft.Row(spacing=0)
    labels_row = ft.Row(spacing=0)
    cursor = ft.Container(left=0, top=0, bottom=0, width=2, bgcolor=ft.Colors.WHITE)
    thumbs_stack = ft.Stack([thumbs_row, cursor], height=96)
    clips_stack = ft.Stack(height=CLIP_LANE_H)

    def _on_focus(_e) -> None:
        nonlocal typing_focus
        typing_focus = True

    def _on_blur(_e) -> None:
        nonlocal typing_focus
        typing_focus = False

    start_tf = ft.TextField(label="Start (sec)", width=130, dense=True, value="0", on_focus=_on_focus, on_blur=_on_blur)
    end_tf = ft.TextField(label="End (sec)", width=130, dense=True, value="0", on_focus=_on_focus, on_blur=_on_blur)
    submit_label = ft.Text("Add Clip")
    submit_btn = ft.FilledButton(content=submit_label, bgcolor=ft.Colors.BLUE_600)
    export_label = ft.Text("Export Clips")
    export_btn = ft.FilledButton(content=export_label, icon=ft.Icons.OUTPUT)

    # ---------- rendering ----------
    def refresh_form() -> None:
        editing = session.selection is not None
        submit_label.value = "Update Clip" if editing else "Add Clip"
        submit_btn.bgcolor = ft.Colors.YELLOW_700 if editing else ft.Colors.BLUE_600

    def refresh_clips() -> None:
        flagged = session.store.overlapping_indices()
        controls = []
        for idx, clip in enumerate(session.store):
            width = max(1.0, axis.pixels_from_time(clip.dur))
            controls.append(
                ft.GestureDetector(
                    left=axis.pixels_from_time(clip.start),
                    top=0,
                    on_double_tap=lambda _e, i=idx: edit_clip(i),
                    content=ft.Container(
                        width=width,
                        height=CLIP_LANE_H,
                        border_radius=4,
                        border=ft.Border.all(1, ft.Colors.WHITE),
                        bgcolor=ft.Colors.RED_500 if idx in flagged else ft.Colors.BLUE_500,
                        opacity=0.6,
                        content=ft.Stack(
                            [
                                ft.Container(left=0, top=0, bottom=0, width=8, bgcolor=ft.Colors.WHITE),
                                ft.Container(right=0, top=0, bottom=0, width=8, bgcolor=ft.Colors.WHITE),
                                ft.Container(
                                    top=6,
                                    left=10,
                                    content=ft.Text(f"{clip.start:g}s - {clip.end:g}s", size=11, no_wrap=True),
                                ),
                                ft.Container(
                                    left=10,
                                    bottom=2,
                                    content=ft.Text("▶", size=11),
                                    on_click=lambda _e, i=idx: session.play_clip(i),
                                ),
                            ]
                        ),
                    ),
                )
            )
        clips_stack.controls = controls
        clips_stack.width = max(
            [axis.pixels_from_time(c.end) for c in session.store] + [len(session.state.thumbnails) * THUMB_W, 0]
        )

    def refresh_media() -> None:
        thumbs = session.state.thumbnails
        thumbs_row.controls = [
            ft.Image(src=src, width=THUMB_W, height=96, fit=ft.ImageFit.COVER) for src in thumbs
        ]
        labels_row.controls = [
            ft.Container(width=THUMB_W, content=ft.Text(lbl, size=12, text_align=ft.TextAlign.CENTER))
            for lbl in axis.ruler_labels(len(thumbs))
        ]
        if session.state.media_url:
            video_slot.content = player.load(session.state.media_url)
            video_slot.visible = True

    def refresh_all() -> None:
        refresh_form()
        refresh_clips()
        export_btn.disabled = session.state.exporting
        export_label.value = "Exporting..." if session.state.exporting else "Export Clips"
        page.update()

    def on_playback_time(_t: float) -> None:
        cursor.left = session.cursor_px
        try:
            cursor.update()
        except Exception as ex:
            log.debug("cursor update skipped: %s", ex)

    session.on_time_change = on_playback_time

    # ---------- actions ----------
    def edit_clip(idx: int) -> None:
        rng = session.edit_clip(idx)
        if rng is None:
            return
        start_tf.value = f"{rng[0]:g}"
        end_tf.value = f"{rng[1]:g}"
        refresh_all()

    def submit_click(_e=None) -> None:
        start = _parse_seconds(start_tf.value)
        end = _parse_seconds(end_tf.value)
        if start is None or end is None:
            snack("Start and end must be numbers.")
            return
        if session.submit_range(start, end):
            start_tf.value = "0"
            end_tf.value = "0"
        refresh_all()

    def cancel_click(_e=None) -> None:
        session.cancel_edit()
        session.controller.release()
        start_tf.value = "0"
        end_tf.value = "0"
        refresh_all()

    def play_selected() -> None:
        if session.selection is not None:
            session.play_clip(session.selection)

    def upload_click(_e=None) -> None:
        async def _pick() -> None:
            picked = await file_picker.pick_files(
                allow_multiple=False,
                initial_directory=cfg.last_upload_dir() or None,
                file_type=ft.FilePickerFileType.CUSTOM,
                allowed_extensions=["mp4"],
            )
            if not picked or not picked[0].path:
                return
            path = picked[0].path
            if session.state.uploading:
                snack("An upload is already in progress.")
                return
            cfg.set_last_upload_dir(path)
            status.value = "Uploading video..."
            page.update()
            ok = await session.upload_media(path)
            status.value = ""
            if ok:
                refresh_media()
                session.tracker.start()
            refresh_all()

        page.run_task(_pick)

    def export_click(_e=None) -> None:
        async def _do() -> None:
            export_btn.disabled = True
            export_label.value = "Exporting..."
            page.update()
            await session.export_clips()
            refresh_all()

        if session.state.exporting:
            return
        page.run_task(_do)

    def show_shortcuts() -> None:
        rows = [ft.Row([ft.Text(k, width=180, weight=ft.FontWeight.BOLD), ft.Text(v)]) for k, v in shortcut_legend()]
        dlg = ft.AlertDialog(
            title=ft.Text("Keyboard shortcuts"),
            content=ft.Column(rows, tight=True),
            actions=[ft.TextButton("Close", on_click=lambda _e: page.pop_dialog())],
        )
        page.show_dialog(dlg)

    submit_btn.on_click = submit_click
    export_btn.on_click = export_click

    # ---------- timeline pointer events ----------
    def on_pan_start(e) -> None:
        nonlocal pan_start_local_x, pan_start_global_x
        pan_start_local_x = _event_local_x(e)
        gx = _event_global_x(e)
        pan_start_global_x = gx if gx is not None else pan_start_local_x
        session.controller.press_at(pan_start_local_x)

    def on_pan_update(e) -> None:
        if session.controller.is_idle:
            return
        gx = _event_global_x(e)
        x = pan_start_local_x + (gx - pan_start_global_x) if gx is not None else _event_local_x(e)
        session.controller.move(x)
        refresh_clips()
        clips_stack.update()

    def on_pan_end(_e) -> None:
        session.controller.release()
        refresh_all()

    clip_lane = ft.GestureDetector(
        mouse_cursor=ft.MouseCursor.MOVE,
        drag_interval=0,
        on_pan_start=on_pan_start,
        on_pan_update=on_pan_update,
        on_pan_end=on_pan_end,
        on_horizontal_drag_start=on_pan_start,
        on_horizontal_drag_update=on_pan_update,
        on_horizontal_drag_end=on_pan_end,
        content=ft.Container(height=CLIP_LANE_H, bgcolor=ft.Colors.GREY_800, content=clips_stack),
    )

    def on_keyboard(e: ft.KeyboardEvent) -> None:
        action = resolve_shortcut_action(
            key=str(getattr(e, "key", "") or ""),
            ctrl=bool(getattr(e, "ctrl", False)),
            shift=bool(getattr(e, "shift", False)),
            alt=bool(getattr(e, "alt", False)),
            meta=bool(getattr(e, "meta", False)),
            typing_focus=typing_focus,
        )
        if action == ACTION_UPLOAD:
            upload_click()
        elif action == ACTION_EXPORT:
            export_click()
        elif action == ACTION_SUBMIT_RANGE:
            submit_click()
        elif action == ACTION_CANCEL:
            cancel_click()
        elif action == ACTION_PLAY_SELECTED:
            play_selected()
        elif action == ACTION_SHOW_SHORTCUTS:
            show_shortcuts()

    page.on_keyboard_event = on_keyboard

    timeline = ft.Container(
        padding=12,
        border_radius=8,
        bgcolor=ft.Colors.GREY_900,
        content=ft.Column(
            [
                ft.Row([ft.Column([thumbs_stack, labels_row, clip_lane], spacing=6)], scroll=ft.ScrollMode.AUTO),
            ]
        ),
    )

    page.add(
        ft.Column(
            [
                ft.Text("Video Editor", size=28, weight=ft.FontWeight.BOLD),
                ft.Row(
                    [
                        ft.ElevatedButton("Upload", icon=ft.Icons.UPLOAD_FILE, on_click=upload_click),
                        ft.IconButton(icon=ft.Icons.KEYBOARD, tooltip="Shortcuts", on_click=lambda _e: show_shortcuts()),
                    ]
                ),
                status,
                video_slot,
                timeline,
                ft.Row([start_tf, end_tf, submit_btn, ft.TextButton("Cancel", on_click=cancel_click)]),
                export_btn,
            ],
            scroll=ft.ScrollMode.AUTO,
            expand=True,
        )
    )
    refresh_all()


if __name__ == "__main__":
    ft.app(target=main)
