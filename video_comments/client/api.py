"""Async HTTP client for the ``/api/video-comments`` endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from video_comments.client.errors import ApiError

COMMENTS_PATH = "/api/video-comments"


@dataclass(frozen=True)
class CommentEntry:
    """One comment as the API returns it."""

    id: int
    username: str
    user_id: int
    text: str
    timestamp: float
    timestamp_formatted: str
    created_at: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> CommentEntry:
        return cls(
            id=int(data["id"]),
            username=str(data["username"]),
            user_id=int(data["user_id"]),
            text=str(data["text"]),
            timestamp=float(data["timestamp"]),
            timestamp_formatted=str(data["timestamp_formatted"]),
            created_at=str(data["created_at"]),
        )


class CommentsApiClient:
    """Thin wrapper over ``httpx.AsyncClient``.

    Authentication rides on whatever cookies the underlying client carries.
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> CommentsApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def list_comments(self, video_id: str) -> list[CommentEntry]:
        data = await self._request("GET", COMMENTS_PATH, params={"video_id": video_id})
        return [CommentEntry.from_json(item) for item in data]

    async def create_comment(self, video_id: str, text: str, timestamp: float) -> CommentEntry:
        data = await self._request(
            "POST",
            COMMENTS_PATH,
            json={"video_id": video_id, "comment": text, "timestamp": timestamp},
        )
        return CommentEntry.from_json(data)

    async def delete_comment(self, comment_id: int) -> str:
        data = await self._request("DELETE", f"{COMMENTS_PATH}/{int(comment_id)}")
        return str(data.get("message", ""))

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiError(status_code=0, message=f"{method} {url} failed: {exc}") from exc

        if response.is_error:
            body = _json_or_empty(response)
            raise ApiError(
                status_code=response.status_code,
                message=str(body.get("error") or response.reason_phrase or "Request failed"),
                details=body.get("details"),
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                status_code=response.status_code,
                message=f"{method} {url} returned a non-JSON body",
            ) from exc


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
