from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# --- Post ---

class PostCandidate(BaseModel):
    """
    Unvalidated post input as submitted by a form or API client.

    Every field may be missing or empty; presence is checked by
    ``services.validation.validate`` so that all field errors are
    reported together rather than failing on the first one.
    """
    slug: str | None = None
    title: str | None = None
    markdown: str | None = None


class PostFields(BaseModel):
    """Validated post content handed to the store."""
    slug: str = Field(min_length=1)
    title: str = Field(min_length=1)
    markdown: str = Field(min_length=1)


class PostResponse(PostFields):
    created_at: datetime | None = None
    updated_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


class PostDetail(PostResponse):
    html: str


# --- Validation ---

class FieldErrors(BaseModel):
    slug: str | None = None
    title: str | None = None
    markdown: str | None = None


class ValidationResult(BaseModel):
    has_errors: bool
    errors: FieldErrors


# --- Mutation outcome ---

class MutationResult(BaseModel):
    """
    Outcome of a create / update / delete request.

    Exactly one of ``redirect_to`` (success) or ``errors`` (rejected) is
    set.  ``status_code`` is the HTTP-equivalent status the transport
    layer should answer with.
    """
    status_code: int = 200
    redirect_to: str | None = None
    errors: dict[str, str | None] | None = None
    post: PostResponse | None = None

    @property
    def ok(self) -> bool:
        return self.redirect_to is not None
