"""
Platform API clients.
"""

from .instagram_graph_client import InstagramGraphClient

__all__ = ["InstagramGraphClient"]
