from __future__ import annotations

from pydantic import BaseModel, Field

from course_catalog.api.schemas.categories import CourseCategoryOut
from course_catalog.api.schemas.insights import InsightOut


class BatchCourseOut(BaseModel):
    insights: list[InsightOut] = Field(default_factory=list)
    categories: list[CourseCategoryOut] = Field(default_factory=list)
