from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from course_catalog.api.deps import get_current_user, get_db_session
from course_catalog.api.schemas.categories import CategoryCreate, CategoryOut
from course_catalog.api.schemas.common import SuccessResponse
from course_catalog.domain import User
from course_catalog.infrastructure.db.models import CategoryModel, CourseCategoryModel

router = APIRouter(prefix="/api/categories", tags=["Categories"])
logger = structlog.get_logger()


def to_category_out(category: CategoryModel) -> CategoryOut:
    return CategoryOut(
        id=category.id,
        user_id=category.user_id,
        name=category.name,
        created_at=category.created_at,
    )


@router.get("", response_model=list[CategoryOut])
async def list_categories(
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> list[CategoryOut]:
    """Return the current user's categories, newest first."""
    stmt = (
        select(CategoryModel)
        .where(CategoryModel.user_id == user.user_id)
        .order_by(CategoryModel.created_at.desc())
    )
    categories = (await session.execute(stmt)).scalars().all()
    return [to_category_out(category) for category in categories]


@router.post("", response_model=CategoryOut)
async def create_category(
    payload: CategoryCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> CategoryOut:
    """Create a category owned by the current user."""
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name is required")

    category = CategoryModel(user_id=user.user_id, name=name)
    session.add(category)
    await session.commit()

    logger.info("category_created", category_id=category.id, user_id=user.user_id)
    return to_category_out(category)


@router.delete("", response_model=SuccessResponse)
async def delete_category(
    category_id: str = Query(..., alias="id", min_length=1),
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> SuccessResponse:
    """Delete one of the current user's categories and every course assigned to it."""
    category = await session.scalar(
        select(CategoryModel).where(
            CategoryModel.id == category_id,
            CategoryModel.user_id == user.user_id,
        )
    )
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )

    # Explicit cascade; databases without FK enforcement rely on it
    assignments = await session.execute(
        delete(CourseCategoryModel).where(
            CourseCategoryModel.category_id == category_id,
            CourseCategoryModel.user_id == user.user_id,
        )
    )
    await session.execute(delete(CategoryModel).where(CategoryModel.id == category_id))
    await session.commit()

    logger.info(
        "category_deleted",
        category_id=category_id,
        user_id=user.user_id,
        assignments_removed=assignments.rowcount,
    )
    return SuccessResponse()
