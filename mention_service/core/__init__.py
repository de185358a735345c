"""
Core mention-processing components: handshake verification, payload
normalization, job construction and the Graph API client.
"""

from mention_service.core.verification import ChallengeVerifier
from mention_service.core.job_builder import build_job
from mention_service.core.normalizers import iter_mention_events
from mention_service.core.channels import InstagramGraphClient
from mention_service.core.exceptions import (
    CoreError,
    UpstreamError,
    UpstreamTimeoutError,
    MissingCredentialError,
)

__all__ = [
    "ChallengeVerifier",
    "build_job",
    "iter_mention_events",
    "InstagramGraphClient",
    "CoreError",
    "UpstreamError",
    "UpstreamTimeoutError",
    "MissingCredentialError",
]
