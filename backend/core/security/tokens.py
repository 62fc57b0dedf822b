"""
JWT token service for authentication.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from jose import JWTError, jwt


@dataclass
class TokenPayload:
    """JWT token payload structure."""

    sub: str  # Profile ID
    sid: str  # Session ID
    exp: datetime
    iat: datetime
    type: str
    role: str | None = None


class TokenService:
    """Service for creating and validating JWT access tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 60,
    ):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._access_token_expire_minutes = access_token_expire_minutes

    @property
    def expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return self._access_token_expire_minutes * 60

    @staticmethod
    def new_session_id() -> str:
        return uuid4().hex

    def create_access_token(
        self,
        user_id: str,
        session_id: str,
        role: str | None = None,
    ) -> str:
        """
        Create an access token bound to a session.

        Args:
            user_id: Profile ID to encode in the token
            session_id: Session the token belongs to; signing out ends it
            role: Optional role to include

        Returns:
            Encoded JWT access token
        """
        now = datetime.now(UTC)
        expire = now + timedelta(minutes=self._access_token_expire_minutes)

        payload = {
            "sub": user_id,
            "sid": session_id,
            "exp": expire,
            "iat": now,
            "type": "access",
        }
        if role:
            payload["role"] = role

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode_token(self, token: str) -> TokenPayload | None:
        """
        Decode and validate a JWT token.

        Returns:
            TokenPayload if valid, None if invalid or expired
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
            )

            for field in ("sub", "sid", "exp", "type"):
                if field not in payload:
                    raise JWTError(f"Missing required field: {field}")

            return TokenPayload(
                sub=payload["sub"],
                sid=payload["sid"],
                exp=datetime.fromtimestamp(payload["exp"], tz=UTC),
                iat=datetime.fromtimestamp(payload.get("iat", 0), tz=UTC),
                type=payload["type"],
                role=payload.get("role"),
            )
        except JWTError:
            return None

    def verify_access_token(self, token: str) -> TokenPayload | None:
        """Return the payload only for a valid access token."""
        payload = self.decode_token(token)
        if payload and payload.type == "access":
            return payload
        return None
