"""
GitHub webhook signature validation utilities
"""

import hashlib
import hmac
from typing import Mapping, Optional

import structlog

logger = structlog.get_logger()

SIGNATURE_HEADER = "X-Hub-Signature"
EVENT_HEADER = "X-GitHub-Event"
DELIVERY_HEADER = "X-GitHub-Delivery"

SIGNATURE_PREFIX = "sha1="


def _get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup"""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def compute_signature(payload: bytes, secret: str) -> str:
    """
    Compute the X-Hub-Signature value GitHub sends for a payload

    Args:
        payload: Raw request body as bytes, exactly as received
        secret: Webhook secret configured in GitHub

    Returns:
        str: "sha1=" followed by the lowercase hex HMAC digest
    """
    digest = hmac.new(secret.encode("utf-8"), payload, hashlib.sha1).hexdigest()
    return SIGNATURE_PREFIX + digest


def validate_github_webhook(payload: bytes, signature: Optional[str], secret: str) -> bool:
    """
    Validate GitHub webhook signature

    Args:
        payload: Raw request body as bytes
        signature: X-Hub-Signature header value, None when the header is absent
        secret: Webhook secret configured in GitHub

    Returns:
        bool: True if signature is valid, False otherwise
    """
    if not signature:
        logger.warning("Missing webhook signature")
        return False

    if not signature.startswith(SIGNATURE_PREFIX):
        logger.warning("Invalid signature format", signature_prefix=signature[:5])
        return False

    expected_signature = compute_signature(payload, secret)

    # Whole header value, prefix included
    is_valid = hmac.compare_digest(
        signature.encode("utf-8"), expected_signature.encode("utf-8")
    )

    if not is_valid:
        logger.warning("Invalid webhook signature", payload_size=len(payload))

    return is_valid


def extract_signature(headers: Mapping[str, str]) -> Optional[str]:
    """Extract the X-Hub-Signature header, None if absent"""
    return _get_header(headers, SIGNATURE_HEADER)


def extract_github_event_type(headers: Mapping[str, str]) -> Optional[str]:
    """
    Extract GitHub event type from webhook headers

    Args:
        headers: Request headers

    Returns:
        Optional[str]: Event type (e.g., 'push', 'pull_request'), None if absent
    """
    return _get_header(headers, EVENT_HEADER)


def extract_delivery_id(headers: Mapping[str, str]) -> str:
    """Extract the X-GitHub-Delivery id used for log correlation"""
    return _get_header(headers, DELIVERY_HEADER) or "unknown"
