"""Domain models for progress tokens."""

from dataclasses import dataclass

COMPLETION_STEP = 999


@dataclass(frozen=True)
class TokenClaims:
    """Claims carried inside a signed progress token."""

    session_id: str
    step: int
    nonce: str
    exp: int
    iat: int | None = None

    def to_payload(self) -> dict[str, object]:
        """Return the claims keyed by their wire names."""
        payload: dict[str, object] = {
            "sessionId": self.session_id,
            "step": self.step,
            "nonce": self.nonce,
            "exp": self.exp,
        }
        if self.iat is not None:
            payload["iat"] = self.iat
        return payload


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed token and its lifetime in seconds."""

    token: str
    expires_in: int
