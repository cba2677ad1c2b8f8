"""
Required-field validation for post input.

A field is present when its value is truthy.  Whitespace-only strings are
therefore accepted as present; callers relying on trimmed values must
strip them themselves.
"""
from collections.abc import Mapping
from typing import Any

from blog.errors import ValidationError
from blog.schemas import FieldErrors, PostCandidate, ValidationResult

# Checked in this order; the message uses the capitalised field name.
REQUIRED_FIELDS = ("slug", "title", "markdown")

# ``/posts/admin`` and ``/posts/admin/new`` are fixed routes, so posts with
# these slugs could not be viewed or edited.
RESERVED_SLUGS = frozenset({"admin", "new"})


def validate(candidate: PostCandidate | Mapping[str, Any]) -> ValidationResult:
    """Return the per-field error map for *candidate*.  Pure, no I/O."""
    if isinstance(candidate, PostCandidate):
        values = candidate.model_dump()
    else:
        values = dict(candidate)

    errors = {
        field: None if values.get(field) else f"{field.capitalize()} is required"
        for field in REQUIRED_FIELDS
    }
    return ValidationResult(
        has_errors=any(errors.values()),
        errors=FieldErrors(**errors),
    )


def ensure_valid(candidate: PostCandidate | Mapping[str, Any]) -> ValidationResult:
    """
    Like ``validate`` but raise ``ValidationError`` when any field is
    missing or the slug is one of ``RESERVED_SLUGS``.
    """
    result = validate(candidate)
    if not result.has_errors:
        result = _check_reserved_slug(result, candidate)
    if result.has_errors:
        raise ValidationError(result.errors.model_dump())
    return result


def _check_reserved_slug(
    result: ValidationResult, candidate: PostCandidate | Mapping[str, Any]
) -> ValidationResult:
    slug = candidate.slug if isinstance(candidate, PostCandidate) else candidate.get("slug")
    if slug not in RESERVED_SLUGS:
        return result
    errors = result.errors.model_copy(update={"slug": "Slug is reserved"})
    return ValidationResult(has_errors=True, errors=errors)
