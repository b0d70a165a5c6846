# accounts/domain/services.py
from __future__ import annotations

import hmac
import time
import uuid
from urllib.parse import urlencode

CERTIFICATION_EMAIL_SUBJECT = "Please certify your email address"


def generate_certification_code() -> str:
    """Random 128-bit token rendered as a UUID4 string."""
    return str(uuid.uuid4())


def secure_compare(a: str, b: str) -> bool:
    """
    Constant-time comparison for secrets.
    Accepts strings; falls back to bytes if needed.
    """
    try:
        return hmac.compare_digest(a, b)
    except TypeError:
        # non-ASCII str is rejected by compare_digest
        return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def current_millis() -> int:
    return time.time_ns() // 1_000_000


def build_certification_url(base_url: str, user_id: int, code: str) -> str:
    query = urlencode({"certification_code": code})
    return f"{base_url.rstrip('/')}/v1/users/{user_id}/verify?{query}"


def build_certification_email(
    base_url: str, user_id: int, code: str
) -> tuple[str, str]:
    """
    Return (subject, body) of the message sent right after account creation.
    """
    url = build_certification_url(base_url, user_id, code)
    body = "Please click the following link to certify your email address: " + url
    return CERTIFICATION_EMAIL_SUBJECT, body
