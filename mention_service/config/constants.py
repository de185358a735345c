"""
Application constants and enumerations.

This module defines all constant values, enumerations, and
configuration defaults used throughout the Mention Service.
"""

from enum import Enum
from typing import Dict, Tuple

# Service Information
SERVICE_NAME = "mention-service"
SERVICE_VERSION = "1.0.0"
SERVICE_DESCRIPTION = "Instagram mention webhook ingestion and auto-reply service"

# Webhook Routes
WEBHOOK_PATH = "/api/meta-webhook"
WEBHOOK_ALIAS_PATH = "/webhooks/instagram"

# Webhook Protocol
SUBSCRIBE_MODE = "subscribe"
MENTIONS_FIELD = "mentions"
HUB_MODE_PARAM = "hub.mode"
HUB_VERIFY_TOKEN_PARAM = "hub.verify_token"
HUB_CHALLENGE_PARAM = "hub.challenge"
VERIFICATION_FAILED_BODY = "verification failed"

# Preflight response headers
CORS_PREFLIGHT_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
}

# Queue Configuration
DEFAULT_MENTIONS_QUEUE_KEY = "instagram:mentions"
DEDUP_KEY_SEGMENT = "seen"
DEFAULT_QUEUE_PUSH_TIMEOUT_SECONDS = 3.0
DEFAULT_DEDUP_TTL_SECONDS = 86400  # 24 hours

# Graph API Configuration
DEFAULT_GRAPH_API_BASE_URL = "https://graph.facebook.com"
DEFAULT_GRAPH_API_VERSION = "v18.0"
DEFAULT_GRAPH_API_TIMEOUT_SECONDS = 5.0
MEDIA_CONTEXT_FIELDS: Tuple[str, ...] = ("id", "username", "caption", "permalink", "media_type")
COMMENT_CONTEXT_FIELDS: Tuple[str, ...] = ("id", "username", "text", "timestamp")

DEFAULT_REPLY_TEMPLATE = "Hey {username} thanks for the mention! We'll take a look shortly."

# Health Check Configuration
HEALTH_CHECK_TIMEOUT = 2  # seconds


# Error Categories
class ErrorCategory(str, Enum):
    """Error categorization for monitoring."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"
    EXTERNAL = "external"
    TIMEOUT = "timeout"
    NETWORK = "network"


# HTTP Status Code Mappings
HTTP_STATUS_CODES = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.AUTHENTICATION: 401,
    ErrorCategory.AUTHORIZATION: 403,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.INTERNAL: 500,
    ErrorCategory.EXTERNAL: 502,
    ErrorCategory.TIMEOUT: 504,
    ErrorCategory.NETWORK: 503,
}
