"""
Reply Service

Decides, from Graph API context, whether a mention deserves an automated
reply and posts it. Context failures are inputs to the decision, not
errors: without media context the workflow only logs.
"""

from typing import Optional

from mention_service.core.channels.instagram_graph_client import InstagramGraphClient
from mention_service.core.exceptions import UpstreamError, MissingCredentialError
from mention_service.models.mention import MentionEvent, MediaContext, CommentContext
from mention_service.models.types import ReplyDecision, ReplyOutcome, SKIP_OUTCOMES
from mention_service.services.base_service import BaseService
from mention_service.utils.metrics import MetricsCollector


def decide_reply(
        media: Optional[MediaContext],
        comment_id: Optional[str],
        configured_username: Optional[str]
) -> ReplyDecision:
    """
    Decide whether to reply to a mention.

    Usernames are compared case-insensitively. Without a configured
    username no media can match, so the workflow fails closed.
    """
    if media is None:
        return ReplyDecision.SKIP_NO_CONTEXT

    owner = (media.username or "").lower()
    account = (configured_username or "").lower()
    if not account or owner != account:
        return ReplyDecision.SKIP_FOREIGN_MEDIA

    if not comment_id:
        return ReplyDecision.SKIP_NO_COMMENT

    return ReplyDecision.REPLY


def render_reply(template: str, commenter_username: Optional[str]) -> str:
    """Fill the reply template with @handle, or nothing when the commenter is unknown."""
    handle = f"@{commenter_username}" if commenter_username else ""
    return " ".join(template.format(username=handle).split())


class ReplyService(BaseService):
    """Context resolution plus the conditional auto-reply"""

    def __init__(
            self,
            graph_client: InstagramGraphClient,
            configured_username: str,
            reply_template: str,
            metrics: Optional[MetricsCollector] = None
    ):
        super().__init__()
        self.graph_client = graph_client
        self.configured_username = configured_username
        self.reply_template = reply_template
        self.metrics = metrics

    async def _resolve_media(self, media_id: str) -> Optional[MediaContext]:
        try:
            return await self.graph_client.fetch_media(media_id)
        except (UpstreamError, MissingCredentialError) as e:
            self.log_failure("resolve_media", e, media_id=media_id)
            return None

    async def _resolve_comment(self, comment_id: str) -> Optional[CommentContext]:
        try:
            return await self.graph_client.fetch_comment(comment_id)
        except (UpstreamError, MissingCredentialError) as e:
            self.log_failure("resolve_comment", e, comment_id=comment_id)
            return None

    async def handle_mention(self, event: MentionEvent) -> ReplyOutcome:
        """
        Run the reply workflow for one mention.

        Media and comment context are resolved one after the other and
        independently; either may be missing. At most one reply is posted.

        Args:
            event: Mention to handle

        Returns:
            ReplyOutcome describing what happened
        """
        media = await self._resolve_media(event.media_id)
        comment = await self._resolve_comment(event.comment_id)

        decision = decide_reply(media, event.comment_id, self.configured_username)
        if decision != ReplyDecision.REPLY:
            outcome = SKIP_OUTCOMES[decision]
            self.log_operation(
                "reply_skipped",
                media_id=event.media_id,
                comment_id=event.comment_id,
                outcome=outcome.value,
                media_owner=media.username if media else None
            )
            return self._record(outcome)

        message = render_reply(self.reply_template, comment.username if comment else None)
        try:
            result = await self.graph_client.reply_to_comment(
                media_id=media.id,
                parent_comment_id=event.comment_id,
                message=message
            )
        except (UpstreamError, MissingCredentialError) as e:
            self.log_failure(
                "post_reply", e,
                media_id=event.media_id,
                comment_id=event.comment_id
            )
            return self._record(ReplyOutcome.REPLY_FAILED)

        self.log_operation(
            "reply_posted",
            media_id=event.media_id,
            comment_id=event.comment_id,
            reply_id=result.get("id")
        )
        return self._record(ReplyOutcome.REPLIED)

    def _record(self, outcome: ReplyOutcome) -> ReplyOutcome:
        if self.metrics:
            self.metrics.reply_outcomes.labels(outcome=outcome.value).inc()
        return outcome
