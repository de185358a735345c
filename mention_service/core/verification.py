"""
Webhook subscription handshake.

The platform confirms a subscription with a GET carrying hub.mode,
hub.verify_token and hub.challenge; the challenge is echoed back only
when the mode and token match exactly.
"""

import hmac
from typing import Optional

import structlog

from mention_service.config.constants import SUBSCRIBE_MODE
from mention_service.exceptions.base_exceptions import VerificationRejectedError


class ChallengeVerifier:
    """Answers the subscription-handshake GET request."""

    def __init__(self, verify_token: str):
        self._verify_token = verify_token or ""
        self.logger = structlog.get_logger(self.__class__.__name__)

    def verify(
            self,
            mode: Optional[str],
            token: Optional[str],
            challenge: Optional[str]
    ) -> str:
        """
        Validate the handshake and return the challenge to echo.

        Args:
            mode: hub.mode query value
            token: hub.verify_token query value
            challenge: hub.challenge query value

        Returns:
            The challenge string, unchanged

        Raises:
            VerificationRejectedError: On any mismatch or missing value
        """
        if not self._verify_token:
            raise VerificationRejectedError(reason="verify_token_not_configured")

        if mode != SUBSCRIBE_MODE:
            raise VerificationRejectedError(reason="mode_mismatch")

        if token is None or not hmac.compare_digest(
                token.encode("utf-8"), self._verify_token.encode("utf-8")
        ):
            raise VerificationRejectedError(reason="token_mismatch")

        if not challenge:
            raise VerificationRejectedError(reason="missing_challenge")

        self.logger.info("Webhook verification succeeded", challenge_length=len(challenge))
        return challenge
