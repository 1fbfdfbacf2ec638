"""
Field rules for projects and forums.

Each checker returns the normalised value or raises ``FieldError``;
``validate_fields`` collects every failure so the caller sees all violated
fields at once.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional
from urllib.parse import urlparse

from portfolio_api.errors import ValidationError
from portfolio_api.kernel.models.base import TAG_MAX_LENGTH, TITLE_MAX_LENGTH, URL_MAX_LENGTH

TITLE_MIN_LENGTH = 3
DESCRIPTION_MIN_LENGTH = 10


class FieldError(ValueError):
    def __init__(self, message: str, type_: str = "value_error"):
        super().__init__(message)
        self.type = type_


def check_title(value: Any) -> str:
    if not isinstance(value, str):
        raise FieldError("must be a string", "string_type")
    value = value.strip()
    if len(value) < TITLE_MIN_LENGTH:
        raise FieldError(f"must be at least {TITLE_MIN_LENGTH} characters", "string_too_short")
    if len(value) > TITLE_MAX_LENGTH:
        raise FieldError(f"must be at most {TITLE_MAX_LENGTH} characters", "string_too_long")
    return value


def check_description(value: Any) -> str:
    if not isinstance(value, str):
        raise FieldError("must be a string", "string_type")
    value = value.strip()
    if len(value) < DESCRIPTION_MIN_LENGTH:
        raise FieldError(
            f"must be at least {DESCRIPTION_MIN_LENGTH} characters", "string_too_short"
        )
    return value


def normalize_tags(value: Any) -> List[str]:
    """Trim and lower-case each tag, keeping the given order."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise FieldError("must be a list of strings", "list_type")
    tags = []
    for tag in value:
        if not isinstance(tag, str) or not tag.strip():
            raise FieldError("tags must be non-empty strings", "string_too_short")
        tag = tag.strip().lower()
        if len(tag) > TAG_MAX_LENGTH:
            raise FieldError(f"tags must be at most {TAG_MAX_LENGTH} characters", "string_too_long")
        tags.append(tag)
    return tags


def check_url(value: Any) -> Optional[str]:
    """Absolute http(s) URL, or None to clear."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise FieldError("must be a string", "string_type")
    value = value.strip()
    if not value:
        return None
    if len(value) > URL_MAX_LENGTH:
        raise FieldError(f"must be at most {URL_MAX_LENGTH} characters", "string_too_long")
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise FieldError("must be an absolute http(s) URL", "url_parsing")
    return value


Rule = Callable[[Any], Any]


def validate_fields(fields: Mapping[str, Any], rules: Mapping[str, Rule], *, required: tuple = ()) -> Dict[str, Any]:
    """
    Apply ``rules`` to ``fields``.

    Keys without a rule are dropped. Keys in ``required`` must be present.

    Raises:
        ValidationError: listing every violated field
    """
    cleaned: Dict[str, Any] = {}
    errors = []
    for name in required:
        if name not in fields:
            errors.append({"field": name, "message": "field required", "type": "missing"})
    for name, value in fields.items():
        rule = rules.get(name)
        if rule is None:
            continue
        try:
            cleaned[name] = rule(value)
        except FieldError as exc:
            errors.append({"field": name, "message": str(exc), "type": exc.type})
    if errors:
        raise ValidationError.for_fields(errors)
    return cleaned
