from __future__ import annotations

from collections.abc import Sequence

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from course_catalog.api.deps import get_current_user, get_db_session
from course_catalog.api.schemas.categories import CourseCategoryCreate, CourseCategoryOut
from course_catalog.api.schemas.common import SuccessResponse
from course_catalog.domain import User
from course_catalog.infrastructure.db.models import CategoryModel, CourseCategoryModel

router = APIRouter(prefix="/api/course-categories", tags=["Course categories"])
logger = structlog.get_logger()


async def load_assignments(
    session: AsyncSession, user_id: str, course_codes: Sequence[str]
) -> list[CourseCategoryOut]:
    """The user's category assignments for the given courses, with category names."""
    stmt = (
        select(CourseCategoryModel, CategoryModel.name)
        .join(CategoryModel, CategoryModel.id == CourseCategoryModel.category_id)
        .where(
            CourseCategoryModel.user_id == user_id,
            CourseCategoryModel.course_code.in_(course_codes),
        )
        .order_by(CourseCategoryModel.created_at)
    )
    rows = (await session.execute(stmt)).all()
    return [
        CourseCategoryOut(
            id=assignment.id,
            category_id=assignment.category_id,
            category_name=name,
            course_code=assignment.course_code,
        )
        for assignment, name in rows
    ]


@router.get("", response_model=list[CourseCategoryOut])
async def list_course_categories(
    course_code: str = Query(..., alias="courseCode", min_length=1),
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> list[CourseCategoryOut]:
    """Return the categories the current user put this course in."""
    return await load_assignments(session, user.user_id, [course_code])


@router.post("", response_model=CourseCategoryOut)
async def add_course_to_category(
    payload: CourseCategoryCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> CourseCategoryOut:
    """Assign a course to one of the current user's categories."""
    category = await session.scalar(
        select(CategoryModel).where(
            CategoryModel.id == payload.category_id,
            CategoryModel.user_id == user.user_id,
        )
    )
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    existing = await session.scalar(
        select(CourseCategoryModel).where(
            CourseCategoryModel.user_id == user.user_id,
            CourseCategoryModel.course_code == payload.course_code,
            CourseCategoryModel.category_id == payload.category_id,
        )
    )
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Course already in category",
        )

    assignment = CourseCategoryModel(
        user_id=user.user_id,
        course_code=payload.course_code,
        category_id=payload.category_id,
    )
    session.add(assignment)
    await session.commit()

    logger.info(
        "course_category_assigned",
        course_code=payload.course_code,
        category_id=payload.category_id,
        user_id=user.user_id,
    )
    return CourseCategoryOut(
        id=assignment.id,
        category_id=assignment.category_id,
        category_name=category.name,
        course_code=assignment.course_code,
    )


@router.delete("", response_model=SuccessResponse)
async def remove_course_from_category(
    course_code: str = Query(..., alias="courseCode", min_length=1),
    category_id: str = Query(..., alias="categoryId", min_length=1),
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> SuccessResponse:
    """Remove a course from one of the current user's categories."""
    await session.execute(
        delete(CourseCategoryModel).where(
            CourseCategoryModel.user_id == user.user_id,
            CourseCategoryModel.course_code == course_code,
            CourseCategoryModel.category_id == category_id,
        )
    )
    await session.commit()

    logger.info(
        "course_category_unassigned",
        course_code=course_code,
        category_id=category_id,
        user_id=user.user_id,
    )
    return SuccessResponse()
