"""Tests for the Instagram Graph API client."""

import asyncio
from urllib.parse import parse_qs

import httpx
import pytest

from mention_service.core.channels import InstagramGraphClient
from mention_service.core.exceptions import (
    MissingCredentialError,
    UpstreamError,
    UpstreamTimeoutError,
)
from tests.fakes import GRAPH_API_URL, GraphApiStub


@pytest.mark.asyncio
async def test_fetch_media_sends_bearer_token_and_field_selection():
    stub = GraphApiStub()
    stub.objects["M1"] = {"id": "M1", "username": "BrandHandle", "caption": "launch day"}
    client = stub.client()

    media = await client.fetch_media("M1")

    assert media.id == "M1"
    assert media.username == "BrandHandle"
    request = stub.requests[0]
    assert request.headers["Authorization"] == "Bearer graph-token"
    assert request.url.params["fields"] == "id,username,caption,permalink,media_type"


@pytest.mark.asyncio
async def test_fetch_comment():
    stub = GraphApiStub()
    stub.objects["C1"] = {"id": "C1", "username": "fan_account", "text": "@brandhandle love it"}

    comment = await stub.client().fetch_comment("C1")

    assert comment.username == "fan_account"
    assert comment.text == "@brandhandle love it"


@pytest.mark.asyncio
async def test_missing_credential_fails_before_any_request():
    stub = GraphApiStub()
    client = stub.client(access_token=None)

    assert client.has_credential is False
    with pytest.raises(MissingCredentialError):
        await client.fetch_media("M1")
    assert stub.requests == []


@pytest.mark.asyncio
async def test_error_status_raises_upstream_error():
    stub = GraphApiStub()
    stub.failing_paths["M1"] = 400

    with pytest.raises(UpstreamError) as exc_info:
        await stub.client().fetch_media("M1")

    assert exc_info.value.status_code == 400
    assert "failed" in exc_info.value.body


@pytest.mark.asyncio
async def test_non_json_body_raises_upstream_error():
    def handler(request):
        return httpx.Response(200, text="<html>maintenance</html>")

    client = InstagramGraphClient(
        api_url=GRAPH_API_URL,
        access_token="graph-token",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )

    with pytest.raises(UpstreamError):
        await client.get_object("M1", ["id"])


@pytest.mark.asyncio
async def test_transport_error_raises_upstream_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = InstagramGraphClient(
        api_url=GRAPH_API_URL,
        access_token="graph-token",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )

    with pytest.raises(UpstreamError) as exc_info:
        await client.get_object("M1", ["id"])

    assert not isinstance(exc_info.value, UpstreamTimeoutError)


@pytest.mark.asyncio
async def test_slow_response_raises_upstream_timeout():
    async def handler(request):
        await asyncio.sleep(3600)

    client = InstagramGraphClient(
        api_url=GRAPH_API_URL,
        access_token="graph-token",
        timeout_seconds=0.05,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )

    with pytest.raises(UpstreamTimeoutError):
        await client.get_object("M1", ["id"])


@pytest.mark.asyncio
async def test_reply_is_posted_under_parent_comment():
    stub = GraphApiStub()

    result = await stub.client().reply_to_comment(
        media_id="M1",
        parent_comment_id="C1",
        message="Hey @fan thanks!"
    )

    assert result == {"id": "reply-1"}
    request = stub.posts[0]
    assert request.url.path == "/v18.0/M1/comments"
    form = parse_qs(request.content.decode())
    assert form == {"message": ["Hey @fan thanks!"], "parent_comment_id": ["C1"]}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        ["unexpected"],
        "unexpected",
        {"username": 12345},
        {"username": "brand", "caption": {"text": "nested"}},
    ],
)
async def test_unexpected_object_shape_raises_upstream_error(body):
    stub = GraphApiStub()
    stub.objects["M1"] = body

    with pytest.raises(UpstreamError) as exc_info:
        await stub.client().fetch_media("M1")

    assert exc_info.value.status_code == 200
    assert exc_info.value.operation == "fetch_media"


@pytest.mark.asyncio
async def test_requested_id_wins_over_response_id():
    stub = GraphApiStub()
    stub.objects["C1"] = {"id": 17, "username": "fan_account"}

    comment = await stub.client().fetch_comment("C1")

    assert comment.id == "C1"
