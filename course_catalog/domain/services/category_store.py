"""Category store: the user's categories and per-course membership lists."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

import structlog

from course_catalog.domain.models import Category, CategoryStoreState
from course_catalog.domain.services.store import ObservableStore
from course_catalog.libs.backend_client import BackendClient, BackendClientError

logger = structlog.get_logger(__name__)


class CategoryStore(ObservableStore[CategoryStoreState]):
    """Lists, creates and deletes categories and tracks which courses sit in them."""

    def __init__(self, client: BackendClient) -> None:
        super().__init__(CategoryStoreState())
        self.client = client

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._state.categories

    @property
    def course_categories(self) -> Mapping[str, tuple[str, ...]]:
        return self._state.course_categories

    def _with_course(self, course_code: str, category_ids: tuple[str, ...]) -> Mapping:
        return MappingProxyType({**self._state.course_categories, course_code: category_ids})

    async def fetch_categories(self) -> tuple[Category, ...]:
        self._set(is_loading=True, error=None)
        try:
            categories = await self.client.list_categories()
        except BackendClientError as exc:
            await self._fail("Failed to fetch categories", exc)
            return self._state.categories

        self._set(categories=tuple(categories), is_loading=False)
        return self._state.categories

    async def add_category(self, name: str) -> Category | None:
        name = name.strip()
        if not name:
            self._set(error="Category name is required")
            return None

        try:
            category = await self.client.create_category(name)
        except BackendClientError as exc:
            await self._fail("Failed to add category", exc, name=name)
            return None

        self._set(categories=(*self._state.categories, category))
        await logger.ainfo("category_added", category_id=category.id)
        return category

    async def remove_category(self, category_id: str) -> bool:
        try:
            await self.client.delete_category(category_id)
        except BackendClientError as exc:
            await self._fail("Failed to remove category", exc, category_id=category_id)
            return False

        course_categories = {
            code: tuple(cid for cid in ids if cid != category_id)
            for code, ids in self._state.course_categories.items()
        }
        self._set(
            categories=tuple(c for c in self._state.categories if c.id != category_id),
            course_categories=MappingProxyType(course_categories),
        )
        await logger.ainfo("category_removed", category_id=category_id)
        return True

    async def fetch_course_categories(self, course_code: str) -> tuple[str, ...]:
        try:
            assignments = await self.client.list_course_categories(course_code)
        except BackendClientError as exc:
            await self._fail("Failed to fetch course categories", exc, course_code=course_code)
            return self._state.course_categories.get(course_code, ())

        category_ids = tuple(assignment.category_id for assignment in assignments)
        self._set(course_categories=self._with_course(course_code, category_ids))
        return category_ids

    async def add_course_to_category(self, course_code: str, category_id: str) -> bool:
        try:
            await self.client.add_course_category(course_code, category_id)
        except BackendClientError as exc:
            await self._fail(
                "Failed to add course to category",
                exc,
                course_code=course_code,
                category_id=category_id,
            )
            return False

        current = self._state.course_categories.get(course_code, ())
        if category_id not in current:
            self._set(course_categories=self._with_course(course_code, (*current, category_id)))
        return True

    async def remove_course_from_category(self, course_code: str, category_id: str) -> bool:
        try:
            await self.client.remove_course_category(course_code, category_id)
        except BackendClientError as exc:
            await self._fail(
                "Failed to remove course from category",
                exc,
                course_code=course_code,
                category_id=category_id,
            )
            return False

        current = self._state.course_categories.get(course_code, ())
        self._set(
            course_categories=self._with_course(
                course_code, tuple(cid for cid in current if cid != category_id)
            )
        )
        return True
