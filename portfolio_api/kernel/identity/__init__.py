"""
Identity Core - authentication and user management.
"""

from portfolio_api.kernel.identity.password import PasswordHasher, verify_password, hash_password
from portfolio_api.kernel.identity.jwt import (
    JWTManager,
    AccessToken,
    AccessTokenPayload,
    get_jwt_manager,
)
from portfolio_api.kernel.identity.identity_service import IdentityService

__all__ = [
    "PasswordHasher",
    "verify_password",
    "hash_password",
    "JWTManager",
    "AccessToken",
    "AccessTokenPayload",
    "get_jwt_manager",
    "IdentityService",
]
