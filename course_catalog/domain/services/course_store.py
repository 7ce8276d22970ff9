"""
Course data store.

Single in-memory source of truth for per-course insights and category
assignments, kept in sync with the backend. Local state only changes
after the backend has confirmed a write.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import replace
from types import MappingProxyType

import structlog

from course_catalog.domain.models import (
    Category,
    CourseEntry,
    CourseStoreState,
    Insight,
)
from course_catalog.domain.services.store import ObservableStore
from course_catalog.libs.backend_client import (
    BackendClient,
    BackendClientError,
    BatchCourseData,
)

logger = structlog.get_logger(__name__)


class CourseStore(ObservableStore[CourseStoreState]):
    """Insights and category membership per course code, plus the user's categories."""

    def __init__(self, client: BackendClient) -> None:
        super().__init__(CourseStoreState())
        self.client = client

    @property
    def course_data(self) -> Mapping[str, CourseEntry]:
        return self._state.course_data

    @property
    def all_categories(self) -> tuple[Category, ...]:
        return self._state.all_categories

    def get_course(self, course_code: str) -> CourseEntry:
        return self._state.course_data.get(course_code, CourseEntry())

    def _with_course(self, course_code: str, entry: CourseEntry) -> Mapping[str, CourseEntry]:
        return MappingProxyType({**self._state.course_data, course_code: entry})

    async def fetch_all_data(self, course_codes: Sequence[str]) -> None:
        """
        Load insights and category assignments for codes not cached yet.

        A failed batch request is recorded in ``error``. A failed categories
        request is recorded too and then re-raised to the caller; course
        entries merged before it are kept.
        """
        cached = self._state.course_data
        new_codes = list(dict.fromkeys(code for code in course_codes if code not in cached))
        if not new_codes:
            return

        self._set(is_loading=True, error=None)

        try:
            batch = await self.client.get_batch(new_codes)
        except BackendClientError as exc:
            await self._fail("Failed to fetch course data", exc, course_codes=new_codes)
            return

        merged = dict(self._state.course_data)
        for code in new_codes:
            data = batch.get(code) or BatchCourseData()
            merged[code] = CourseEntry(
                insights=tuple(data.insights),
                categories=tuple(assignment.category_id for assignment in data.categories),
            )

        # Categories belong to a user; anonymous sessions only get course data
        if not self.client.is_authenticated:
            self._set(course_data=MappingProxyType(merged), is_loading=False)
            await logger.ainfo("course_data_fetched", course_codes=new_codes, categories=None)
            return

        self._set(course_data=MappingProxyType(merged))

        try:
            categories = await self.client.list_categories()
        except BackendClientError as exc:
            await self._fail("Failed to fetch categories", exc)
            raise

        self._set(all_categories=tuple(categories), is_loading=False)
        await logger.ainfo(
            "course_data_fetched",
            course_codes=new_codes,
            categories=len(categories),
        )

    async def fetch_insights(self, course_code: str) -> tuple[Insight, ...]:
        """Reload one course's insights, newest first."""
        try:
            insights = await self.client.list_insights(course_code)
        except BackendClientError as exc:
            await self._fail("Failed to fetch insights", exc, course_code=course_code)
            return ()

        entry = replace(self.get_course(course_code), insights=tuple(insights))
        self._set(course_data=self._with_course(course_code, entry))
        return entry.insights

    async def add_insight(
        self,
        course_code: str,
        text: str,
        difficulty: int,
        is_anonymous: bool = False,
    ) -> Insight | None:
        try:
            insight = await self.client.create_insight(course_code, text, difficulty, is_anonymous)
        except BackendClientError as exc:
            await self._fail("Failed to add insight", exc, course_code=course_code)
            return None

        entry = self.get_course(course_code)
        entry = replace(entry, insights=(*entry.insights, insight))
        self._set(course_data=self._with_course(course_code, entry))
        await logger.ainfo("insight_added", course_code=course_code, insight_id=insight.id)
        return insight

    async def remove_insight(self, course_code: str, insight_id: str) -> bool:
        try:
            await self.client.delete_insight(insight_id)
        except BackendClientError as exc:
            await self._fail(
                "Failed to remove insight", exc, course_code=course_code, insight_id=insight_id
            )
            return False

        entry = self.get_course(course_code)
        entry = replace(
            entry,
            insights=tuple(insight for insight in entry.insights if insight.id != insight_id),
        )
        self._set(course_data=self._with_course(course_code, entry))
        return True

    async def toggle_category(self, course_code: str, category_id: str) -> bool:
        """Flip membership of course_code in a category; returns the new membership."""
        entry = self.get_course(course_code)
        assigned = category_id in entry.categories

        try:
            if assigned:
                await self.client.remove_course_category(course_code, category_id)
            else:
                await self.client.add_course_category(course_code, category_id)
        except BackendClientError as exc:
            await self._fail(
                "Failed to update category",
                exc,
                course_code=course_code,
                category_id=category_id,
            )
            return assigned

        # Re-read after the await so concurrent updates to other fields survive
        entry = self.get_course(course_code)
        if assigned:
            categories = tuple(cid for cid in entry.categories if cid != category_id)
        elif category_id in entry.categories:
            categories = entry.categories
        else:
            categories = (*entry.categories, category_id)
        self._set(course_data=self._with_course(course_code, replace(entry, categories=categories)))
        return not assigned

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

        self._set(all_categories=(*self._state.all_categories, category))
        return category

    async def remove_category(self, category_id: str) -> bool:
        try:
            await self.client.delete_category(category_id)
        except BackendClientError as exc:
            await self._fail("Failed to remove category", exc, category_id=category_id)
            return False

        # The backend already dropped the assignments; mirror that locally
        course_data = {
            code: replace(
                entry, categories=tuple(cid for cid in entry.categories if cid != category_id)
            )
            for code, entry in self._state.course_data.items()
        }
        self._set(
            all_categories=tuple(c for c in self._state.all_categories if c.id != category_id),
            course_data=MappingProxyType(course_data),
        )
        return True
