"""
Service layer for Mention Service.
"""

from .base_service import BaseService
from .mention_service import MentionService
from .reply_service import ReplyService, decide_reply, render_reply

__all__ = [
    "BaseService",
    "MentionService",
    "ReplyService",
    "decide_reply",
    "render_reply",
]
