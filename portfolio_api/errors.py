"""
Domain error taxonomy.

Services raise these; the application maps them onto HTTP responses in one
place (see ``portfolio_api.main``).
"""

from typing import Any, Dict, List, Optional


class PortfolioError(Exception):
    """Base class for every error the core reports to callers."""

    status_code: int = 500
    code: str = "internal"
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(PortfolioError):
    """Malformed or missing input; ``errors`` lists every violated field."""

    status_code = 400
    code = "validation_error"
    default_message = "Validation error"

    @classmethod
    def for_fields(cls, errors: List[Dict[str, Any]]) -> "ValidationError":
        fields = ", ".join(e["field"] for e in errors)
        return cls(f"Validation failed for: {fields}", errors=errors)


class BadRequest(PortfolioError):
    status_code = 400
    code = "bad_request"
    default_message = "Bad request"


class AuthFailure(PortfolioError):
    status_code = 401
    code = "auth_failure"
    default_message = "Invalid credentials."


class Unauthenticated(PortfolioError):
    status_code = 401
    code = "unauthenticated"
    default_message = "Authentication required."


class Forbidden(PortfolioError):
    status_code = 403
    code = "forbidden"
    default_message = "Forbidden"


class NotFound(PortfolioError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class Conflict(PortfolioError):
    status_code = 409
    code = "conflict"
    default_message = "Conflict"


class Internal(PortfolioError):
    status_code = 500
    code = "internal"
