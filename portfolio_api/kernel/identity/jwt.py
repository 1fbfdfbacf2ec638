"""
JWT token management for authentication.

Tokens are stateless: logging out means the client discards its token.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from portfolio_api.config import get_settings


class AccessTokenPayload(BaseModel):
    """Verified access token claims."""

    sub: str  # User ID
    username: str
    exp: datetime
    iat: datetime
    jti: str

    @property
    def user_id(self) -> uuid.UUID:
        return uuid.UUID(self.sub)


class AccessToken(BaseModel):
    """A signed access token and its lifetime."""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    expires_in: int  # Seconds until expiry


class JWTManager:
    """JWT access token creation and verification."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        access_token_expire_minutes: Optional[int] = None,
    ):
        settings = get_settings()
        self.secret_key = secret_key or settings.secret_key
        self.algorithm = algorithm or settings.algorithm
        self.access_token_expire_minutes = (
            access_token_expire_minutes or settings.access_token_expire_minutes
        )

    def create_access_token(
        self,
        user_id: uuid.UUID,
        username: str,
        expires_delta: Optional[timedelta] = None,
    ) -> AccessToken:
        """
        Sign an access token for a user.

        Args:
            user_id: User's unique identifier
            username: User's (case-folded) username
            expires_delta: Optional custom lifetime

        Returns:
            AccessToken with the encoded token and its expiry
        """
        now = datetime.now(timezone.utc)
        lifetime = expires_delta if expires_delta is not None else timedelta(
            minutes=self.access_token_expire_minutes
        )
        expire = now + lifetime

        payload = {
            "sub": str(user_id),
            "username": username,
            "exp": expire,
            "iat": now,
            "jti": str(uuid.uuid4()),
            "type": "access",
        }

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        return AccessToken(
            access_token=token,
            expires_at=expire,
            expires_in=max(int(lifetime.total_seconds()), 0),
        )

    def verify_access_token(self, token: str) -> Optional[AccessTokenPayload]:
        """
        Verify and decode an access token.

        Returns:
            AccessTokenPayload if valid, None if the signature, expiry or
            shape is wrong
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
            )
        except JWTError:
            return None

        if payload.get("type") != "access":
            return None

        # pydantic's ValidationError is a ValueError
        try:
            uuid.UUID(str(payload["sub"]))
            return AccessTokenPayload(
                sub=payload["sub"],
                username=payload["username"],
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                jti=payload["jti"],
            )
        except (KeyError, TypeError, ValueError):
            return None


_jwt_manager: Optional[JWTManager] = None


def get_jwt_manager() -> JWTManager:
    """Get or create the default JWT manager."""
    global _jwt_manager
    if _jwt_manager is None:
        _jwt_manager = JWTManager()
    return _jwt_manager
