"""
Mention payload normalizer.

Walks the webhook notification tree
{entry: [{changes: [{field, value: {media_id, comment_id}}]}]}
and yields one MentionEvent per usable "mentions" change. Structural
absence anywhere in the tree is treated as "nothing here", so a
malformed payload yields an empty sequence instead of raising.
"""

from typing import Any, Iterator, Optional

from mention_service.config.constants import MENTIONS_FIELD
from mention_service.models.mention import MentionEvent


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_id(value: Any) -> Optional[str]:
    # Graph ids arrive as strings but some senders emit numbers
    if isinstance(value, bool):
        return None
    if isinstance(value, (str, int)):
        text = str(value).strip()
        return text or None
    return None


def extract_mention(change: Any) -> Optional[MentionEvent]:
    """
    Convert a single change node into a MentionEvent.

    Returns None for non-mention fields and for mentions missing either id.
    """
    if not isinstance(change, dict) or change.get("field") != MENTIONS_FIELD:
        return None

    value = change.get("value")
    if not isinstance(value, dict):
        return None

    media_id = _as_id(value.get("media_id"))
    comment_id = _as_id(value.get("comment_id"))
    if not media_id or not comment_id:
        return None

    return MentionEvent(media_id=media_id, comment_id=comment_id)


def iter_mention_events(payload: Any) -> Iterator[MentionEvent]:
    """
    Lazily yield mention events in entry/change order.

    Args:
        payload: Decoded webhook body of any shape

    Yields:
        MentionEvent for every "mentions" change carrying both ids
    """
    if not isinstance(payload, dict):
        return

    for entry in _as_list(payload.get("entry")):
        if not isinstance(entry, dict):
            continue
        for change in _as_list(entry.get("changes")):
            event = extract_mention(change)
            if event is not None:
                yield event
