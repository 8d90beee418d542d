"""Signed session tokens and the cookie store that carries them.

Token layout: ``base64url(json(payload)) + "." + base64url(hmac_sha256(secret, encoded))``,
both halves unpadded. Tokens are self-contained; nothing is stored server-side.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import time
from dataclasses import dataclass

from fastapi import Request, Response
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class SessionPayload(BaseModel):
    """Identity carried by a session token. Wire keys are camelCase, expiry is ``exp``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user_id: str = Field(..., alias="userId", min_length=1)
    city_id: str = Field(..., alias="cityId", min_length=1)
    email: str | None = None
    name: str
    expires_at: int | None = Field(None, alias="exp")


@dataclass(frozen=True)
class SessionPolicy:
    """Signing secret plus the attributes of the session cookie."""

    secret: str
    cookie_name: str = "city_marketplace_session"
    max_age_seconds: int = 60 * 60 * 24 * 7
    secure: bool = False


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(value: str) -> bytes:
    padded = value + "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _sign(encoded: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), encoded.encode("ascii"), hashlib.sha256).digest()
    return _b64encode(digest)


def encode_session(payload: SessionPayload, secret: str) -> str:
    """Serialize and sign ``payload``."""
    body = payload.model_dump_json(by_alias=True)
    encoded = _b64encode(body.encode("utf-8"))
    return f"{encoded}.{_sign(encoded, secret)}"


def decode_session(token: str | None, secret: str, now: float | None = None) -> SessionPayload | None:
    """Verify and decode a token.

    Returns None for every failure (malformed, tampered, undecodable, expired) so
    callers cannot tell the reasons apart.
    """
    if not token:
        return None
    parts = token.split(".")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    encoded, signature = parts
    try:
        expected = _sign(encoded, secret)
        # compare_digest checks length first and then runs in fixed time.
        matches = hmac.compare_digest(signature.encode("ascii"), expected.encode("ascii"))
    except UnicodeEncodeError:
        return None
    if not matches:
        return None
    try:
        payload = SessionPayload.model_validate_json(_b64decode(encoded))
    except (binascii.Error, ValueError, ValidationError):
        return None
    current = time.time() if now is None else now
    if payload.expires_at is not None and payload.expires_at < current:
        return None
    return payload


class SessionStore:
    """Reads and writes the session cookie according to a :class:`SessionPolicy`."""

    def __init__(self, policy: SessionPolicy):
        self.policy = policy

    def create(self, response: Response, payload: SessionPayload, now: float | None = None) -> SessionPayload:
        """Stamp the expiry, sign the payload and set it as the session cookie."""
        issued_at = int(time.time() if now is None else now)
        stamped = payload.model_copy(update={"expires_at": issued_at + self.policy.max_age_seconds})
        response.set_cookie(
            key=self.policy.cookie_name,
            value=encode_session(stamped, self.policy.secret),
            max_age=self.policy.max_age_seconds,
            path="/",
            secure=self.policy.secure,
            httponly=True,
            samesite="lax",
        )
        return stamped

    def read(self, request: Request) -> SessionPayload | None:
        token = request.cookies.get(self.policy.cookie_name)
        return decode_session(token, self.policy.secret)

    def destroy(self, response: Response) -> None:
        response.delete_cookie(
            key=self.policy.cookie_name,
            path="/",
            secure=self.policy.secure,
            httponly=True,
            samesite="lax",
        )
