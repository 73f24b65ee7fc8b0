from __future__ import annotations

from typing import List, Optional, Tuple


# Shortcut action ids used by app.py dispatcher.
ACTION_UPLOAD = "upload"
ACTION_EXPORT = "export"
ACTION_SUBMIT_RANGE = "submit_range"
ACTION_CANCEL = "cancel"
ACTION_PLAY_SELECTED = "play_selected"
ACTION_SHOW_SHORTCUTS = "show_shortcuts"


def _normalize_key(key: str) -> str:
    raw = str(key or "")
    if raw == " ":
        return "space"
    k = raw.strip().lower().replace(" ", "")
    aliases = {
        "spacebar": "space",
        "return": "enter",
        "numpadenter": "enter",
        "esc": "escape",
    }
    return aliases.get(k, k)


def resolve_shortcut_action(
    *,
    key: str,
    ctrl: bool = False,
    shift: bool = False,
    alt: bool = False,
    meta: bool = False,
    typing_focus: bool = False,
) -> Optional[str]:
    """
    Resolve a keyboard event into an editor action.

    `typing_focus=True` blocks plain-key shortcuts so users can type clip
    times into the start/end fields. Enter and Escape still work there, since
    they submit or cancel the form being typed into.
    """
    k = _normalize_key(key)
    if not k:
        return None

    if k == "f1" or k == "?" or (k == "/" and bool(shift)):
        return ACTION_SHOW_SHORTCUTS

    if bool(alt):
        return None

    primary_mod = bool(ctrl or meta)
    if primary_mod and k == "o":
        return ACTION_UPLOAD
    if primary_mod and k == "e":
        return ACTION_EXPORT
    if primary_mod:
        return None

    if k == "enter":
        return ACTION_SUBMIT_RANGE
    if k == "escape":
        return ACTION_CANCEL

    if typing_focus:
        return None

    if k == "space":
        return ACTION_PLAY_SELECTED
    return None


def shortcut_legend() -> List[Tuple[str, str]]:
    """Human-readable shortcuts list for the in-app help dialog."""
    return [
        ("Ctrl/Cmd + O", "Upload a video"),
        ("Ctrl/Cmd + E", "Export clips"),
        ("Enter", "Add clip / update selected clip"),
        ("Escape", "Cancel clip edit"),
        ("Space", "Play selected clip from its start"),
        ("F1 or ?", "Show shortcuts help"),
    ]
