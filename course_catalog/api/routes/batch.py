from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from course_catalog.api.deps import get_db_session, get_optional_user
from course_catalog.api.routes.course_categories import load_assignments
from course_catalog.api.routes.insights import load_insights
from course_catalog.api.schemas.batch import BatchCourseOut
from course_catalog.domain import User

router = APIRouter(prefix="/api/batch", tags=["Batch"])
logger = structlog.get_logger()


@router.get("", response_model=dict[str, BatchCourseOut])
async def get_batch(
    course_codes: str = Query("", alias="courseCodes"),
    session: AsyncSession = Depends(get_db_session),
    user: User | None = Depends(get_optional_user),
) -> dict[str, BatchCourseOut]:
    """Insights for several courses at once, plus the caller's assignments when signed in."""
    codes = list(dict.fromkeys(code.strip() for code in course_codes.split(",") if code.strip()))
    if not codes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Course codes are required",
        )

    insights = await load_insights(session, codes)
    assignments = await load_assignments(session, user.user_id, codes) if user else []

    grouped = {code: BatchCourseOut() for code in codes}
    for insight in insights:
        grouped[insight.course_code].insights.append(insight)
    for assignment in assignments:
        if assignment.course_code in grouped:
            grouped[assignment.course_code].categories.append(assignment)

    logger.info(
        "batch_fetched",
        course_count=len(codes),
        insight_count=len(insights),
        authenticated=user is not None,
    )
    return grouped
