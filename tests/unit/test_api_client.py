"""Unit tests for the async comments API client"""
import asyncio
import json

import httpx
import pytest

from video_comments.client.api import CommentEntry, CommentsApiClient
from video_comments.client.errors import ApiError

COMMENT_JSON = {
    "id": 7,
    "username": "Alice",
    "user_id": 1,
    "text": "Look here",
    "timestamp": 42.5,
    "timestamp_formatted": "00:42",
    "created_at": "2026-10-17T12:00:00+00:00",
}


def _run(handler, call):
    async def scenario():
        transport = httpx.MockTransport(handler)
        async with httpx.AsyncClient(base_url="http://testserver", transport=transport) as http:
            return await call(CommentsApiClient(client=http))

    return asyncio.run(scenario())


class TestRequests:
    """Test request shapes and response parsing"""

    def test_list_sends_video_id_and_parses_entries(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[COMMENT_JSON])

        entries = _run(handler, lambda api: api.list_comments("v1"))

        assert seen[0].method == "GET"
        assert seen[0].url.path == "/api/video-comments"
        assert seen[0].url.params["video_id"] == "v1"
        assert entries == [CommentEntry.from_json(COMMENT_JSON)]
        assert entries[0].timestamp == 42.5

    def test_create_posts_comment_field(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(201, json=COMMENT_JSON)

        entry = _run(handler, lambda api: api.create_comment("v1", "Look here", 42.5))

        assert bodies == [{"video_id": "v1", "comment": "Look here", "timestamp": 42.5}]
        assert entry.id == 7

    def test_delete_hits_the_item_url(self):
        paths = []

        def handler(request):
            paths.append((request.method, request.url.path))
            return httpx.Response(200, json={"message": "Comment deleted successfully"})

        message = _run(handler, lambda api: api.delete_comment(7))

        assert paths == [("DELETE", "/api/video-comments/7")]
        assert message == "Comment deleted successfully"


class TestErrors:
    """Test error mapping"""

    def test_error_body_becomes_api_error(self):
        def handler(request):
            return httpx.Response(403, json={"error": "Unauthorized", "code": "unauthorized", "details": None})

        with pytest.raises(ApiError) as exc:
            _run(handler, lambda api: api.delete_comment(7))

        assert exc.value.status_code == 403
        assert exc.value.message == "Unauthorized"

    def test_validation_details_are_kept(self):
        details = {"comment": ["Length must be between 1 and 1000."]}

        def handler(request):
            return httpx.Response(422, json={"error": "Validation error", "code": "validation_error", "details": details})

        with pytest.raises(ApiError) as exc:
            _run(handler, lambda api: api.create_comment("v1", "x" * 1001, 1))

        assert exc.value.details == details

    def test_transport_failure_is_status_zero(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ApiError) as exc:
            _run(handler, lambda api: api.list_comments("v1"))

        assert exc.value.status_code == 0
        assert isinstance(exc.value.__cause__, httpx.ConnectError)

    def test_non_json_error_body(self):
        def handler(request):
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        with pytest.raises(ApiError) as exc:
            _run(handler, lambda api: api.list_comments("v1"))

        assert exc.value.status_code == 502
        assert exc.value.message == "Bad Gateway"
