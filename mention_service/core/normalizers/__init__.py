"""
Payload normalizers.
"""

from .mention_normalizer import iter_mention_events, extract_mention

__all__ = [
    "iter_mention_events",
    "extract_mention",
]
