from __future__ import annotations

from collections.abc import Sequence

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from course_catalog.api.deps import get_current_user, get_db_session
from course_catalog.api.schemas.common import SuccessResponse
from course_catalog.api.schemas.insights import InsightAuthorOut, InsightCreate, InsightOut
from course_catalog.domain import User
from course_catalog.infrastructure.db.models import InsightModel, UserModel

router = APIRouter(prefix="/api/insights", tags=["Insights"])
logger = structlog.get_logger()


def to_insight_out(insight: InsightModel, author: UserModel | None) -> InsightOut:
    """Serialize an insight, hiding its author when it was posted anonymously."""
    if insight.is_anonymous:
        return InsightOut(
            id=insight.id,
            course_code=insight.course_code,
            user_id=None,
            text=insight.text,
            difficulty=insight.difficulty,
            is_anonymous=True,
            created_at=insight.created_at,
            user=None,
        )

    return InsightOut(
        id=insight.id,
        course_code=insight.course_code,
        user_id=insight.user_id,
        text=insight.text,
        difficulty=insight.difficulty,
        is_anonymous=False,
        created_at=insight.created_at,
        user=(
            InsightAuthorOut(id=author.id, name=author.name, image=author.image)
            if author
            else None
        ),
    )


async def load_insights(session: AsyncSession, course_codes: Sequence[str]) -> list[InsightOut]:
    """Insights for the given courses with their authors, newest first."""
    stmt = (
        select(InsightModel, UserModel)
        .outerjoin(UserModel, UserModel.id == InsightModel.user_id)
        .where(InsightModel.course_code.in_(course_codes))
        .order_by(InsightModel.created_at.desc())
    )
    rows = (await session.execute(stmt)).all()
    return [to_insight_out(insight, author) for insight, author in rows]


async def sync_user_profile(session: AsyncSession, user: User) -> UserModel:
    """Mirror the session's profile claims into the users table."""
    profile = await session.get(UserModel, user.user_id)
    if profile is None:
        profile = UserModel(id=user.user_id)
        session.add(profile)
    profile.name = user.name
    profile.image = user.image
    profile.email = user.email or None
    return profile


@router.get("", response_model=list[InsightOut])
async def list_insights(
    course_code: str = Query(..., alias="courseCode", min_length=1),
    session: AsyncSession = Depends(get_db_session),
) -> list[InsightOut]:
    """Return every insight for a course; no authentication required."""
    return await load_insights(session, [course_code])


@router.post("", response_model=InsightOut)
async def create_insight(
    payload: InsightCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> InsightOut:
    """Create an insight authored by the current user."""
    author = await sync_user_profile(session, user)
    insight = InsightModel(
        course_code=payload.course_code,
        user_id=user.user_id,
        text=payload.text,
        difficulty=payload.difficulty,
        is_anonymous=payload.is_anonymous,
    )
    session.add(insight)
    await session.commit()

    logger.info(
        "insight_created",
        insight_id=insight.id,
        course_code=insight.course_code,
        user_id=user.user_id,
        is_anonymous=insight.is_anonymous,
    )
    return to_insight_out(insight, author)


@router.delete("", response_model=SuccessResponse)
async def delete_insight(
    insight_id: str = Query(..., alias="id", min_length=1),
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> SuccessResponse:
    """Delete one of the current user's insights."""
    result = await session.execute(
        delete(InsightModel).where(
            InsightModel.id == insight_id,
            InsightModel.user_id == user.user_id,
        )
    )
    await session.commit()

    if result.rowcount == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Insight not found or unauthorized",
        )

    logger.info("insight_deleted", insight_id=insight_id, user_id=user.user_id)
    return SuccessResponse()
