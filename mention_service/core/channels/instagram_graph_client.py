"""
Instagram Graph API client.

Resolves media and comment context for a mention and posts threaded
replies. One client (and one pooled httpx.AsyncClient) is created per
process and shared by all requests.
"""

import asyncio
from typing import Dict, Any, Optional, Sequence, Type, TypeVar

import httpx
import structlog
from pydantic import ValidationError

from mention_service.config.constants import (
    DEFAULT_GRAPH_API_TIMEOUT_SECONDS,
    MEDIA_CONTEXT_FIELDS,
    COMMENT_CONTEXT_FIELDS,
)
from mention_service.core.exceptions import (
    UpstreamError,
    UpstreamTimeoutError,
    MissingCredentialError,
)
from mention_service.models.mention import MediaContext, CommentContext

ContextT = TypeVar("ContextT", MediaContext, CommentContext)


class InstagramGraphClient:
    """Authenticated access to the Graph API objects the reply workflow needs."""

    def __init__(
            self,
            api_url: str,
            access_token: Optional[str],
            timeout_seconds: float = DEFAULT_GRAPH_API_TIMEOUT_SECONDS,
            http_client: Optional[httpx.AsyncClient] = None
    ):
        """
        Args:
            api_url: Versioned Graph API root, e.g. https://graph.facebook.com/v18.0
            access_token: Bearer credential; calls fail with MissingCredentialError without it
            timeout_seconds: Ceiling for each call
            http_client: Pre-built client (tests inject one with a mock transport)
        """
        self.api_url = api_url.rstrip("/")
        self._access_token = access_token
        self.timeout_seconds = timeout_seconds
        self.logger = structlog.get_logger(self.__class__.__name__)

        self.http_client = http_client or httpx.AsyncClient(
            timeout=timeout_seconds,
            limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            headers={"User-Agent": "MentionService/1.0 InstagramGraphClient"}
        )

    @property
    def has_credential(self) -> bool:
        return bool(self._access_token)

    def _auth_headers(self, operation: str) -> Dict[str, str]:
        if not self._access_token:
            raise MissingCredentialError(operation=operation)
        return {"Authorization": f"Bearer {self._access_token}"}

    async def _request(
            self,
            method: str,
            path: str,
            operation: str,
            params: Optional[Dict[str, str]] = None,
            data: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        headers = self._auth_headers(operation)
        url = f"{self.api_url}/{path.lstrip('/')}"

        try:
            response = await asyncio.wait_for(
                self.http_client.request(method, url, params=params, data=data, headers=headers),
                timeout=self.timeout_seconds
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            self.logger.warning(
                "Graph API timeout",
                operation=operation,
                timeout_seconds=self.timeout_seconds
            )
            raise UpstreamTimeoutError(operation, self.timeout_seconds) from e
        except httpx.HTTPError as e:
            raise UpstreamError(
                f"Graph API {operation} transport error: {e}",
                operation=operation
            ) from e

        if response.status_code >= 400:
            raise UpstreamError(
                f"Graph API {operation} failed with status {response.status_code}",
                status_code=response.status_code,
                body=response.text,
                operation=operation
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                f"Graph API {operation} returned a non-JSON body",
                status_code=response.status_code,
                body=response.text,
                operation=operation
            ) from e

    async def get_object(self, object_id: str, fields: Sequence[str]) -> Dict[str, Any]:
        """
        Fetch a Graph object by id with a field selection.

        Raises:
            MissingCredentialError: No access token configured
            UpstreamError: Non-success status, transport failure or timeout
        """
        return await self._request(
            "GET",
            object_id,
            operation="get_object",
            params={"fields": ",".join(fields)}
        )

    def _to_context(self, model: Type[ContextT], object_id: str, data: Any, operation: str) -> ContextT:
        if not isinstance(data, dict):
            raise UpstreamError(
                f"Graph API {operation} returned {type(data).__name__}, expected an object",
                status_code=200,
                body=repr(data),
                operation=operation
            )
        try:
            return model.model_validate({**data, "id": object_id})
        except ValidationError as e:
            raise UpstreamError(
                f"Graph API {operation} returned an unexpected object: {e.error_count()} invalid field(s)",
                status_code=200,
                body=repr(data),
                operation=operation
            ) from e

    async def fetch_media(self, media_id: str) -> MediaContext:
        data = await self.get_object(media_id, MEDIA_CONTEXT_FIELDS)
        return self._to_context(MediaContext, media_id, data, "fetch_media")

    async def fetch_comment(self, comment_id: str) -> CommentContext:
        data = await self.get_object(comment_id, COMMENT_CONTEXT_FIELDS)
        return self._to_context(CommentContext, comment_id, data, "fetch_comment")

    async def reply_to_comment(
            self,
            media_id: str,
            parent_comment_id: str,
            message: str
    ) -> Dict[str, Any]:
        """
        Post a reply threaded under an existing comment.

        Args:
            media_id: Media the comment belongs to
            parent_comment_id: Comment to reply under
            message: Reply text

        Returns:
            Graph API response, normally {"id": "<reply id>"}
        """
        result = await self._request(
            "POST",
            f"{media_id}/comments",
            operation="reply_to_comment",
            data={"message": message, "parent_comment_id": parent_comment_id}
        )

        self.logger.info(
            "Comment reply created",
            media_id=media_id,
            parent_comment_id=parent_comment_id,
            reply_id=result.get("id")
        )
        return result

    async def close(self) -> None:
        await self.http_client.aclose()
