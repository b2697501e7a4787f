"""Pydantic models for persisted notes."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


def now_timestamp() -> str:
    """Current time as an ISO-8601 string."""
    return datetime.now(UTC).isoformat()


class Note(BaseModel):
    """A single note row.

    ``time`` holds the most recent write, insert or update alike.
    """

    id: Optional[int] = Field(default=None, description="Row id, None until stored")
    title: str = Field(..., description="Note title")
    description: str = Field(..., description="Note body")
    time: str = Field(
        default_factory=now_timestamp,
        description="ISO-8601 timestamp of the last write",
    )

    @classmethod
    def from_row(cls, row: Any) -> Note:
        """Build a Note from an ``(id, title, description, time)`` row."""
        return cls(id=row[0], title=row[1], description=row[2], time=row[3])

    @property
    def date(self) -> str:
        """Date portion of ``time``."""
        return self.time.split("T")[0]


class NoteDraft(BaseModel):
    """Title and description as typed into the form, before validation."""

    title: str = ""
    description: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.title) and bool(self.description)
