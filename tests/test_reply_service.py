"""Tests for the auto-reply decision and workflow."""

from urllib.parse import parse_qs

import pytest

from mention_service.models.mention import MediaContext, MentionEvent
from mention_service.models.types import ReplyDecision, ReplyOutcome
from mention_service.services.reply_service import ReplyService, decide_reply, render_reply
from tests.fakes import GraphApiStub

TEMPLATE = "Hey {username} thanks for the mention! We'll take a look shortly."


def _service(stub, metrics=None, username="brandhandle", access_token="graph-token"):
    return ReplyService(
        graph_client=stub.client(access_token=access_token),
        configured_username=username,
        reply_template=TEMPLATE,
        metrics=metrics
    )


# =============================================================================
# Decision Tests
# =============================================================================


def test_decide_reply_matches_username_case_insensitively():
    media = MediaContext(id="M1", username="BrandHandle")

    assert decide_reply(media, "C1", "brandhandle") == ReplyDecision.REPLY


def test_decide_reply_skips_foreign_media():
    media = MediaContext(id="M1", username="someone_else")

    assert decide_reply(media, "C1", "brandhandle") == ReplyDecision.SKIP_FOREIGN_MEDIA


def test_decide_reply_fails_closed_without_configured_username():
    media = MediaContext(id="M1", username=None)

    assert decide_reply(media, "C1", "") == ReplyDecision.SKIP_FOREIGN_MEDIA


def test_decide_reply_without_context():
    assert decide_reply(None, "C1", "brandhandle") == ReplyDecision.SKIP_NO_CONTEXT


def test_decide_reply_without_comment():
    media = MediaContext(id="M1", username="brandhandle")

    assert decide_reply(media, None, "brandhandle") == ReplyDecision.SKIP_NO_COMMENT


def test_render_reply_with_and_without_commenter():
    assert render_reply(TEMPLATE, "fan") == "Hey @fan thanks for the mention! We'll take a look shortly."
    assert render_reply(TEMPLATE, None) == "Hey thanks for the mention! We'll take a look shortly."


# =============================================================================
# Workflow Tests
# =============================================================================


@pytest.mark.asyncio
async def test_own_media_gets_exactly_one_reply(metrics):
    stub = GraphApiStub()
    stub.objects["M1"] = {"id": "M1", "username": "BrandHandle"}
    stub.objects["C1"] = {"id": "C1", "username": "fan_account"}

    outcome = await _service(stub, metrics).handle_mention(MentionEvent(media_id="M1", comment_id="C1"))

    assert outcome == ReplyOutcome.REPLIED
    assert len(stub.posts) == 1
    form = parse_qs(stub.posts[0].content.decode())
    assert form["parent_comment_id"] == ["C1"]
    assert form["message"] == ["Hey @fan_account thanks for the mention! We'll take a look shortly."]
    assert metrics.registry.get_sample_value(
        "mention_service_reply_outcomes_total", {"outcome": "replied"}
    ) == 1


@pytest.mark.asyncio
async def test_foreign_media_gets_no_reply():
    stub = GraphApiStub()
    stub.objects["M1"] = {"id": "M1", "username": "other_brand"}
    stub.objects["C1"] = {"id": "C1", "username": "fan_account"}

    outcome = await _service(stub).handle_mention(MentionEvent(media_id="M1", comment_id="C1"))

    assert outcome == ReplyOutcome.SKIPPED_FOREIGN_MEDIA
    assert stub.posts == []


@pytest.mark.asyncio
async def test_unresolvable_media_only_logs():
    stub = GraphApiStub()
    stub.failing_paths["M1"] = 500

    outcome = await _service(stub).handle_mention(MentionEvent(media_id="M1", comment_id="C1"))

    assert outcome == ReplyOutcome.SKIPPED_NO_CONTEXT
    assert stub.posts == []


@pytest.mark.asyncio
async def test_missing_access_token_skips_without_requests():
    stub = GraphApiStub()

    outcome = await _service(stub, access_token=None).handle_mention(
        MentionEvent(media_id="M1", comment_id="C1")
    )

    assert outcome == ReplyOutcome.SKIPPED_NO_CONTEXT
    assert stub.requests == []


@pytest.mark.asyncio
async def test_unknown_commenter_still_gets_reply_without_handle():
    stub = GraphApiStub()
    stub.objects["M1"] = {"id": "M1", "username": "brandhandle"}

    outcome = await _service(stub).handle_mention(MentionEvent(media_id="M1", comment_id="C1"))

    assert outcome == ReplyOutcome.REPLIED
    form = parse_qs(stub.posts[0].content.decode())
    assert form["message"] == ["Hey thanks for the mention! We'll take a look shortly."]


@pytest.mark.asyncio
async def test_failed_post_is_reported_not_raised():
    stub = GraphApiStub()
    stub.objects["M1"] = {"id": "M1", "username": "brandhandle"}
    stub.objects["C1"] = {"id": "C1", "username": "fan_account"}
    stub.failing_paths["M1/comments"] = 403

    outcome = await _service(stub).handle_mention(MentionEvent(media_id="M1", comment_id="C1"))

    assert outcome == ReplyOutcome.REPLY_FAILED
