from __future__ import annotations

from datetime import datetime

from pydantic import Field

from course_catalog.api.schemas.common import CamelModel


class InsightAuthorOut(CamelModel):
    id: str = Field(alias="_id")
    name: str | None = None
    image: str | None = None


class InsightOut(CamelModel):
    id: str = Field(alias="_id")
    course_code: str
    # Withheld together with user when the insight is anonymous
    user_id: str | None = None
    text: str
    difficulty: int
    is_anonymous: bool = False
    created_at: datetime
    user: InsightAuthorOut | None = None


class InsightCreate(CamelModel):
    course_code: str = Field(..., min_length=1, max_length=32)
    text: str = Field(..., min_length=1)
    difficulty: int = Field(..., ge=1, le=10)
    is_anonymous: bool = False
