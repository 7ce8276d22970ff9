from __future__ import annotations

from datetime import datetime

from pydantic import Field

from course_catalog.api.schemas.common import CamelModel


class CategoryOut(CamelModel):
    id: str = Field(alias="_id")
    user_id: str
    name: str
    created_at: datetime


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=128)


class CourseCategoryOut(CamelModel):
    id: str = Field(alias="_id")
    category_id: str
    category_name: str | None = None
    course_code: str | None = None


class CourseCategoryCreate(CamelModel):
    course_code: str = Field(..., min_length=1, max_length=32)
    category_id: str = Field(..., min_length=1)
