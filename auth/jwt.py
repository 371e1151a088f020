"""
Signed bearer tokens.

Tokens are base64-encoded JSON payloads (``user_id``, ``email``, ``exp``)
signed with HMAC-SHA256 using ``config.jwt_secret`` (env var: ``JWT_SECRET``).
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode

from config.settings import config
from connectors.errors import UnauthenticatedError


def _signature(raw: bytes) -> str:
    return hmac.new(config.jwt_secret.encode(), raw, hashlib.sha256).hexdigest()


def create_token(user_id: str, email: str = "") -> str:
    """Create a signed token for ``user_id`` valid for ``JWT_EXPIRY_SECONDS``."""
    payload = {
        "user_id": user_id,
        "email": email,
        "exp": int(time.time()) + config.jwt_expiry_seconds,
    }
    raw = json.dumps(payload).encode()
    return urlsafe_b64encode(raw).decode() + "." + _signature(raw)


def verify_token(token: str) -> str:
    """
    Verify token and return ``user_id``.

    Raises ``UnauthenticatedError`` on malformed, tampered or expired tokens.
    """
    try:
        encoded, sig = token.split(".", 1)
        raw = urlsafe_b64decode(encoded.encode())
        if not hmac.compare_digest(sig, _signature(raw)):
            raise ValueError("bad signature")
        payload = json.loads(raw)
        if payload.get("exp", 0) < time.time():
            raise ValueError("token expired")
        return str(payload["user_id"])
    except (ValueError, KeyError, TypeError) as exc:
        raise UnauthenticatedError(f"Invalid or expired token: {exc}") from exc
