from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .backend import DEFAULT_BACKEND_URL
from .timeaxis import DEFAULT_PIXELS_PER_SECOND


def _clamped_int(raw: Any, default: int, lo: int, hi: int) -> int:
    try:
        v = int(raw)
    except Exception:
        v = default
    return max(lo, min(hi, v))


class ConfigStore:
    """
    Simple JSON config store.

    Default location: ~/.clipmark/config.json
    """

    def __init__(self, root_dir: Path) -> None:
        self.root_dir = Path(root_dir)
        self.path = self.root_dir / "config.json"

    @staticmethod
    def default() -> "ConfigStore":
        return ConfigStore(Path.home() / ".clipmark")

    def load(self) -> Dict[str, Any]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                return data
        except FileNotFoundError:
            return self.default_config()
        except Exception:
            # Corrupted file; don't crash the app.
            return self.default_config()
        return self.default_config()

    def save(self, data: Dict[str, Any]) -> None:
        self.root_dir.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def default_config(self) -> Dict[str, Any]:
        return {
            "backend_url": DEFAULT_BACKEND_URL,
            "poll_interval_ms": 500,
            "pixels_per_second": DEFAULT_PIXELS_PER_SECOND,
            "request_timeout_sec": 0,
            "last_upload_dir": "",
        }

    def backend_url(self) -> str:
        raw = self.load().get("backend_url")
        url = str(raw or "").strip().rstrip("/")
        return url or DEFAULT_BACKEND_URL

    def poll_interval_sec(self) -> float:
        ms = _clamped_int(self.load().get("poll_interval_ms", 500), 500, 100, 5000)
        return ms / 1000.0

    def pixels_per_second(self) -> int:
        raw = self.load().get("pixels_per_second", DEFAULT_PIXELS_PER_SECOND)
        return _clamped_int(raw, DEFAULT_PIXELS_PER_SECOND, 1, 200)

    def request_timeout_sec(self) -> Optional[float]:
        """None means requests never time out (0 or missing in the file)."""
        v = _clamped_int(self.load().get("request_timeout_sec", 0), 0, 0, 3600)
        return float(v) if v > 0 else None

    def last_upload_dir(self) -> str:
        raw = str(self.load().get("last_upload_dir") or "").strip()
        if raw and Path(raw).is_dir():
            return raw
        return ""

    def set_last_upload_dir(self, path: str) -> None:
        p = str(path or "").strip()
        if not p:
            return
        d = Path(p)
        if not d.is_dir():
            d = d.parent
        try:
            d = d.resolve()
        except Exception:
            pass
        cfg = self.load()
        cfg["last_upload_dir"] = str(d)
        self.save(cfg)
