"""
Signed OAuth ``state`` tokens.

The browser returns from the provider without our bearer header, so the
user who started the handshake travels in ``state``: a base64 JSON payload
(``user_id``, ``exp``) plus a truncated HMAC-SHA256 signature.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import secrets
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Optional

from config.settings import config
from connectors.errors import UnauthenticatedError


def _sign(raw: bytes, secret: str) -> str:
    return hmac.new(secret.encode(), raw, hashlib.sha256).hexdigest()[:32]


def create_state(user_id: str, *, secret: Optional[str] = None, ttl: Optional[int] = None) -> str:
    """Create an opaque state string encoding user_id + expiry."""
    secret = secret or config.oauth_state_secret
    ttl = ttl if ttl is not None else config.oauth_state_ttl_seconds
    payload = json.dumps(
        {"user_id": user_id, "exp": int(time.time()) + ttl, "nonce": secrets.token_hex(8)}
    )
    raw = payload.encode()
    return urlsafe_b64encode(raw).decode() + "." + _sign(raw, secret)


def verify_state(state: Optional[str], *, secret: Optional[str] = None) -> str:
    """Verify a state token and return its user_id; raises ``UnauthenticatedError``."""
    if not state:
        raise UnauthenticatedError("The sign-in session for this connection is missing. Please try again.")
    secret = secret or config.oauth_state_secret
    try:
        encoded, sig = state.split(".", 1)
        raw = urlsafe_b64decode(encoded.encode())
        if not hmac.compare_digest(sig, _sign(raw, secret)):
            raise ValueError("bad signature")
        payload = json.loads(raw)
        if payload.get("exp", 0) < time.time():
            raise ValueError("state expired")
        return str(payload["user_id"])
    except (ValueError, KeyError, TypeError) as exc:
        raise UnauthenticatedError(
            f"The sign-in session for this connection is invalid or expired ({exc}). Please try again."
        ) from exc
