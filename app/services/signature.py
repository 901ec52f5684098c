"""
Webhook signature verification.
"""

import hashlib
import hmac
from typing import Optional

SIGNATURE_PREFIX = "sha256="


def compute_signature(secret: str, payload: bytes) -> str:
    """Return the ``sha256=<hex>`` signature GitHub sends for ``payload``."""
    digest = hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()
    return SIGNATURE_PREFIX + digest


def verify_signature(secret: str, payload: bytes, signature: Optional[str]) -> bool:
    """
    Verify the X-Hub-Signature-256 header of a webhook delivery.

    Args:
        secret: Shared webhook secret
        payload: Raw request body, exactly as received
        signature: Header value (may be missing)

    Returns:
        True if the signature matches, False otherwise. Never raises.
    """
    if not signature or not isinstance(signature, str):
        return False

    expected = compute_signature(secret, payload)

    # Compare bytes; compare_digest rejects non-ASCII str
    try:
        supplied = signature.encode("utf-8")
    except UnicodeEncodeError:
        return False

    return hmac.compare_digest(expected.encode(), supplied)
