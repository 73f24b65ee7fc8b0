from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx


DEFAULT_BACKEND_URL = "https://decoupleservergit-1.onrender.com"


class NetworkError(RuntimeError):
    """Raised when an upload, thumbnail fetch or export request fails."""

    def __init__(self, operation: str, detail: str) -> None:
        super().__init__(f"{operation} failed: {detail}")
        self.operation = operation
        self.detail = detail


@dataclass(frozen=True)
class UploadResult:
    url: str
    filename: str


class BackendClient:
    """
    HTTP client for the media backend.

    Endpoints:
        POST /upload                 multipart "video" -> {url, filename}
        GET  /thumbnails/{filename}  -> {thumbnails: [...]}
        POST /export                 {filename, clips} -> status only

    `timeout=None` waits indefinitely.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BACKEND_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = str(base_url or DEFAULT_BACKEND_URL).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    async def _request(self, operation: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                return response
        except httpx.HTTPStatusError as ex:
            raise NetworkError(operation, f"HTTP {ex.response.status_code}") from ex
        except httpx.HTTPError as ex:
            raise NetworkError(operation, str(ex) or type(ex).__name__) from ex

    @staticmethod
    def _json(operation: str, response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as ex:
            raise NetworkError(operation, "response is not JSON") from ex
        if not isinstance(data, dict):
            raise NetworkError(operation, "unexpected response body")
        return data

    async def upload(self, path: str) -> UploadResult:
        p = Path(path)
        try:
            payload = p.read_bytes()
        except OSError as ex:
            raise NetworkError("upload", f"cannot read {p.name}: {ex}") from ex

        response = await self._request(
            "upload",
            "POST",
            "/upload",
            files={"video": (p.name, payload, "video/mp4")},
        )
        data = self._json("upload", response)
        url = str(data.get("url") or "").strip()
        filename = str(data.get("filename") or "").strip()
        if not url or not filename:
            raise NetworkError("upload", "response is missing url/filename")
        return UploadResult(url=url, filename=filename)

    async def fetch_thumbnails(self, filename: str) -> List[str]:
        response = await self._request("thumbnails", "GET", f"/thumbnails/{quote(str(filename), safe='')}")
        data = self._json("thumbnails", response)
        raw = data.get("thumbnails", [])
        if not isinstance(raw, list):
            raise NetworkError("thumbnails", "thumbnails is not a list")
        return [str(x) for x in raw]

    async def export(self, filename: str, clips: List[Dict[str, Any]]) -> None:
        """`clips` is the ordered list of {"start", "end"} ranges to cut."""
        payload = {"filename": str(filename), "clips": list(clips)}
        await self._request("export", "POST", "/export", json=payload)
