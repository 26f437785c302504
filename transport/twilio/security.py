"""
Twilio Signature Verification

SECURITY BOUNDARY - Verify Twilio's X-Twilio-Signature.
No pipeline imports. No skip policy. No logic beyond the HMAC scheme.

Scheme (must match Twilio byte for byte):
1. Start from the full webhook URL
2. Append every POST parameter, sorted by name, as name + value (no separators)
3. HMAC-SHA1 the result with the account auth token, base64-encode it
"""

import base64
import hashlib
import hmac
from typing import Mapping, Optional

SIGNATURE_HEADER = "X-Twilio-Signature"


def build_signature_payload(url: str, params: Mapping[str, str]) -> str:
    """Concatenate the URL with sorted name/value pairs."""
    return url + "".join(f"{key}{params[key]}" for key in sorted(params))


def compute_signature(secret: str, url: str, params: Mapping[str, str]) -> str:
    """
    Compute the base64 HMAC-SHA1 signature Twilio would send.

    Args:
        secret: Account auth token (shared secret)
        url: Externally visible webhook URL
        params: Form parameters of the POST

    Returns:
        Base64-encoded signature string
    """
    digest = hmac.new(
        key=secret.encode("utf-8"),
        msg=build_signature_payload(url, params).encode("utf-8"),
        digestmod=hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(
    secret: str,
    provided_signature: Optional[str],
    url: str,
    params: Mapping[str, str],
) -> bool:
    """
    Check a provided signature against the expected one.

    Fails closed: a missing or empty signature never verifies.
    Comparison is constant-time over equal-length buffers; inputs of
    different length are rejected before the comparison.

    Args:
        secret: Account auth token (shared secret)
        provided_signature: Value of the X-Twilio-Signature header
        url: Externally visible webhook URL
        params: Form parameters of the POST

    Returns:
        True only on an exact match
    """
    if not provided_signature:
        return False

    expected = compute_signature(secret, url, params).encode("ascii")
    provided = provided_signature.encode("utf-8")

    if len(expected) != len(provided):
        return False

    return hmac.compare_digest(expected, provided)
