"""HMAC-signed progress tokens.

Token format: ``b64url(header).b64url(claims).b64url(hmac_sha256)`` with
base64url padding stripped. The signature covers the exact ASCII bytes of
``header.claims``, so the server can verify a token without storing it.
"""

import base64
import hashlib
import hmac
import json
import logging
import math
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace

from security_awareness.domain.errors import EncodingError
from security_awareness.domain.tokens import COMPLETION_STEP, TokenClaims

logger = logging.getLogger(__name__)

_HEADER = {"alg": "HS256", "typ": "JWT"}
_MS_PER_MINUTE = 60 * 1000


def now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def generate_nonce() -> str:
    """Return a fresh random UUID4 string."""
    return str(uuid.uuid4())


def is_valid_step_progression(current_step: int, requested_step: int) -> bool:
    """Return true when the requested step is the next one or the completion step."""
    return requested_step in (current_step + 1, COMPLETION_STEP)


@dataclass
class TokenCodec:
    """Signs and verifies progress tokens with a shared secret."""

    secret: str
    clock: Callable[[], int] = now_ms

    def create_expiration(self, minutes: int) -> int:
        """Return an absolute expiry timestamp `minutes` from now."""
        return self.clock() + minutes * _MS_PER_MINUTE

    def sign(self, claims: TokenClaims) -> str:
        """Stamp `iat` on the claims and return the signed token."""
        stamped = replace(claims, iat=self.clock())
        try:
            header = _b64encode(_dump_json(_HEADER))
            body = _b64encode(_dump_json(stamped.to_payload()))
        except (TypeError, ValueError) as exc:
            logger.error(
                "Token signing failed", extra={"session_id": claims.session_id}
            )
            raise EncodingError from exc
        signing_input = f"{header}.{body}"
        return f"{signing_input}.{self._signature(signing_input)}"

    def verify(self, token: object) -> TokenClaims | None:  # noqa: PLR0911
        """Return the token claims, or None if the token is not acceptable."""
        if not token or not isinstance(token, str):
            return None

        parts = token.split(".")
        if len(parts) != 3:  # noqa: PLR2004
            logger.warning("Malformed token", extra={"segments": len(parts)})
            return None

        header, body, signature = parts
        expected = self._signature(f"{header}.{body}")
        if not hmac.compare_digest(
            expected.encode("ascii"), signature.encode("utf-8", "surrogatepass")
        ):
            logger.warning("Invalid token signature")
            return None

        try:
            payload = json.loads(_b64decode(body))
        except ValueError as exc:
            logger.warning("Token payload could not be decoded", extra={"error": exc})
            return None

        claims = _claims_from_payload(payload)
        if claims is None:
            logger.warning("Invalid token payload structure")
            return None

        if claims.exp <= self.clock():
            logger.info(
                "Token expired",
                extra={"session_id": claims.session_id, "exp": claims.exp},
            )
            return None

        return claims

    def _signature(self, signing_input: str) -> str:
        digest = hmac.new(
            self.secret.encode("utf-8"),
            signing_input.encode("utf-8", "surrogatepass"),
            hashlib.sha256,
        ).digest()
        return _b64encode(digest)


def _dump_json(value: dict[str, object]) -> bytes:
    return json.dumps(value, separators=(",", ":"), allow_nan=False).encode("utf-8")


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(segment: str) -> bytes:
    padded = segment + "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(padded)


def _claims_from_payload(payload: object) -> TokenClaims | None:
    """Build claims from a decoded body, rejecting missing or mistyped fields."""
    if not isinstance(payload, dict):
        return None
    session_id = payload.get("sessionId")
    step = payload.get("step")
    nonce = payload.get("nonce")
    exp = payload.get("exp")
    iat = payload.get("iat")
    if not isinstance(session_id, str) or not session_id:
        return None
    if not isinstance(step, int) or isinstance(step, bool):
        return None
    if not isinstance(nonce, str) or not nonce:
        return None
    if not isinstance(exp, int | float) or isinstance(exp, bool):
        return None
    if not math.isfinite(exp):
        return None
    return TokenClaims(
        session_id=session_id,
        step=step,
        nonce=nonce,
        exp=int(exp),
        iat=iat if isinstance(iat, int) and not isinstance(iat, bool) else None,
    )
