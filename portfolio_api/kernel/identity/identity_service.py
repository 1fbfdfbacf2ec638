"""
Identity service: registration, credential checks and token issuance.
"""

import uuid
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.errors import AuthFailure, Conflict, NotFound, Unauthenticated
from portfolio_api.kernel.identity.jwt import AccessToken, JWTManager, get_jwt_manager
from portfolio_api.kernel.identity.password import PasswordHasher
from portfolio_api.kernel.models.user import User
from portfolio_api.logging_config import get_logger

logger = get_logger(__name__)

# Same message for unknown user and wrong password
INVALID_CREDENTIALS = "Invalid credentials."


def fold(value: str) -> str:
    """Normalise a username or email for storage and lookup."""
    return value.strip().lower()


class IdentityService:
    """
    Service for user identity operations.

    Handles registration, credential verification and token issuance.
    """

    def __init__(
        self,
        session: AsyncSession,
        jwt_manager: Optional[JWTManager] = None,
        hasher: Optional[PasswordHasher] = None,
    ):
        self.session = session
        self.jwt_manager = jwt_manager or get_jwt_manager()
        self.hasher = hasher or PasswordHasher()
        self._dummy_hash: Optional[str] = None

    async def register_user(self, username: str, email: str, password: str) -> User:
        """
        Register a new user.

        The password is hashed here, before the insert; only the digest is
        stored.

        Raises:
            Conflict: If the username or email is already taken
        """
        username = fold(username)
        email = fold(email)

        query = select(User.id).where(or_(User.username == username, User.email == email))
        if (await self.session.execute(query)).first() is not None:
            raise Conflict("Username or Email already exists.")

        user = User(
            username=username,
            email=email,
            password_hash=self.hasher.hash(password),
        )
        self.session.add(user)
        # A concurrent registration can still win the race; the unique
        # index then rejects this insert.
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            raise Conflict("Username or Email already exists.")

        logger.info("User registered", extra={"user_id": str(user.id)})
        return user

    async def verify_credentials(self, username: str, password: str) -> User:
        """
        Check a username/password pair.

        Raises:
            AuthFailure: identical for an unknown user and a wrong password
        """
        user = await self.get_user_by_username(username)
        if user is None:
            # Spend the same hashing time as a real comparison
            self.hasher.verify(password, self._get_dummy_hash())
            logger.warning("Login failed")
            raise AuthFailure(INVALID_CREDENTIALS)

        if not self.hasher.verify(password, user.password_hash):
            logger.warning("Login failed")
            raise AuthFailure(INVALID_CREDENTIALS)

        return user

    async def authenticate(self, username: str, password: str) -> tuple[User, AccessToken]:
        """Verify credentials and sign an access token."""
        user = await self.verify_credentials(username, password)
        token = self.jwt_manager.create_access_token(user_id=user.id, username=user.username)
        logger.info("User logged in", extra={"user_id": str(user.id)})
        return user, token

    async def get_profile(self, user_id: uuid.UUID) -> User:
        """
        Get a user's profile.

        Raises:
            NotFound: If no such user exists
        """
        user = await self.get_user_by_id(user_id)
        if user is None:
            raise NotFound("User not found.")
        return user

    async def resolve_subject(self, token: Optional[str]) -> User:
        """
        Turn a bearer token into the authenticated user.

        Raises:
            Unauthenticated: missing, invalid or expired token, or a token
                for a user that no longer exists
        """
        if not token:
            raise Unauthenticated("Authentication required.")

        claims = self.jwt_manager.verify_access_token(token)
        if claims is None:
            raise Unauthenticated("Invalid or expired token.")

        user = await self.get_user_by_id(claims.user_id)
        if user is None:
            raise Unauthenticated("User not found.")
        return user

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Get a user by ID."""
        return await self.session.get(User, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        """Get a user by case-folded username."""
        query = select(User).where(User.username == fold(username))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by case-folded email."""
        query = select(User).where(User.email == fold(email))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self.hasher.hash(uuid.uuid4().hex)
        return self._dummy_hash
