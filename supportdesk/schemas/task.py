"""Pydantic schemas for task (article) requests and responses."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 2_000
CONTENT_MAX_LENGTH = 100_000
KEYWORD_MAX_LENGTH = 64
MAX_KEYWORDS = 50
REASON_MAX_LENGTH = 2_000


class TaskRequest(BaseModel):
    """
    Body for creating or replacing a task.

    type is checked by the workflow (not here) so an unknown value yields the
    dedicated "invalid task type" error. category is optional: on create it is
    always taken from the route; on update an omitted category keeps the route's.
    """

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    content: str = Field(default="", max_length=CONTENT_MAX_LENGTH)
    type: str = Field(..., description="Q&A or Issue")
    category: str | None = Field(default=None, max_length=64)
    keywords: list[str] = Field(default_factory=list, max_length=MAX_KEYWORDS)

    @field_validator("keywords")
    @classmethod
    def normalize_keywords(cls, v: list[str]) -> list[str]:
        """Ordered set: strip, drop blanks and repeats, keep first occurrence order."""
        seen: dict[str, None] = {}
        for raw in v:
            kw = raw.strip()
            if not kw:
                continue
            if len(kw) > KEYWORD_MAX_LENGTH:
                raise ValueError(f"keywords must be at most {KEYWORD_MAX_LENGTH} characters each")
            seen.setdefault(kw, None)
        return list(seen)


class RejectRequest(BaseModel):
    """Optional free-text reason shown to the author."""

    reason: str | None = Field(default=None, max_length=REASON_MAX_LENGTH)


class TaskOwner(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: str


class TaskResponse(BaseModel):
    """Task as returned by the dashboard endpoints, with its owner when known."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    content: str
    type: str
    category: str
    status: str
    rating: float
    keywords: list[str]
    rejection_reason: str | None = None
    user_id: int | None
    user: TaskOwner | None = None
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    message: str
