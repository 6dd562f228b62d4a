"""
Course Repository

Data access layer for the catalog: Course, Topic and ContentItem.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.repositories.base import BaseRepository
from app.models.course import Course
from app.models.topic import Topic
from app.models.content_item import ContentItem


class CourseRepository(BaseRepository[Course]):
    """Repository for Course model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Course, db)

    async def list_catalog(
        self,
        include_inactive: bool = False,
        skip: int = 0,
        limit: int = 100
    ) -> List[Course]:
        stmt = select(self.model)
        if not include_inactive:
            stmt = stmt.where(self.model.is_active.is_(True))
        stmt = stmt.order_by(self.model.title).offset(skip).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_with_outline(self, course_id: UUID) -> Optional[Course]:
        """Course with topics and their content items, both in display order."""
        stmt = (
            select(self.model)
            .options(
                selectinload(self.model.topics).selectinload(Topic.content_items)
            )
            .where(self.model.id == course_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()


class TopicRepository(BaseRepository[Topic]):
    """Repository for Topic model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Topic, db)

    async def get_with_course(self, topic_id: UUID) -> Optional[Topic]:
        stmt = (
            select(self.model)
            .options(selectinload(self.model.course))
            .where(self.model.id == topic_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()


class ContentItemRepository(BaseRepository[ContentItem]):
    """Repository for ContentItem model."""

    def __init__(self, db: AsyncSession):
        super().__init__(ContentItem, db)

    async def get_with_course(self, content_item_id: UUID) -> Optional[ContentItem]:
        """Content item with its topic and the topic's course loaded."""
        stmt = (
            select(self.model)
            .options(selectinload(self.model.topic).selectinload(Topic.course))
            .where(self.model.id == content_item_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
