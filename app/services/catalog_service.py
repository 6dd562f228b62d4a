"""
Catalog Service

Courses, their topics and content items. Read access is open to any
signed-in user; writes are limited to admins, and for topics and
content items also to the course's instructor of record.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ForbiddenError
from app.models.user import User
from app.models.user_role import RoleName
from app.models.course import Course
from app.models.topic import Topic
from app.models.content_item import ContentItem
from app.repositories.course_repo import (
    CourseRepository,
    TopicRepository,
    ContentItemRepository,
)
from app.schemas.course import (
    CourseCreate,
    CourseUpdate,
    TopicCreate,
    TopicUpdate,
    ContentItemCreate,
    ContentItemUpdate,
)

logger = logging.getLogger(__name__)


def is_admin(user: User) -> bool:
    return user.has_role(RoleName.ADMIN.value)


def can_manage_course(user: User, course: Course) -> bool:
    """Admins manage every course; instructors only the ones they are recorded on."""
    return is_admin(user) or course.instructor == str(user.id)


class CatalogService:
    """Service for the course catalog."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.course_repo = CourseRepository(db)
        self.topic_repo = TopicRepository(db)
        self.content_item_repo = ContentItemRepository(db)

    # ============================================================
    # Courses
    # ============================================================

    async def list_courses(
        self,
        include_inactive: bool = False,
        skip: int = 0,
        limit: int = 100
    ) -> List[Course]:
        return await self.course_repo.list_catalog(include_inactive, skip, limit)

    async def get_course(self, course_id: UUID) -> Course:
        course = await self.course_repo.get_by_id(course_id)
        if not course:
            raise NotFoundError("Course not found")
        return course

    async def get_course_outline(self, course_id: UUID) -> Course:
        course = await self.course_repo.get_with_outline(course_id)
        if not course:
            raise NotFoundError("Course not found")
        return course

    async def create_course(self, user: User, data: CourseCreate) -> Course:
        if not is_admin(user):
            raise ForbiddenError("Only administrators can create courses")

        course = await self.course_repo.create(**data.model_dump())
        logger.info(f"Course created: {course.id} by {user.id}")
        return course

    async def update_course(self, user: User, course_id: UUID, data: CourseUpdate) -> Course:
        if not is_admin(user):
            raise ForbiddenError("Only administrators can edit courses")

        course = await self.get_course(course_id)
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return course
        return await self.course_repo.update(course_id, **update_data)

    async def delete_course(self, user: User, course_id: UUID) -> bool:
        if not is_admin(user):
            raise ForbiddenError("Only administrators can delete courses")

        await self.get_course(course_id)
        logger.info(f"Course deleted: {course_id} by {user.id}")
        return await self.course_repo.delete(course_id)

    # ============================================================
    # Topics & Content Items
    # ============================================================

    async def _get_managed_topic(self, user: User, topic_id: UUID) -> Topic:
        topic = await self.topic_repo.get_with_course(topic_id)
        if not topic:
            raise NotFoundError("Topic not found")
        if not can_manage_course(user, topic.course):
            logger.warning(f"User {user.id} refused changes to topic {topic_id}")
            raise ForbiddenError()
        return topic

    async def _get_managed_content_item(self, user: User, content_item_id: UUID) -> ContentItem:
        item = await self.get_content_item(content_item_id)
        if not can_manage_course(user, item.topic.course):
            logger.warning(f"User {user.id} refused changes to content item {content_item_id}")
            raise ForbiddenError()
        return item

    async def create_topic(self, user: User, course_id: UUID, data: TopicCreate) -> Topic:
        course = await self.get_course(course_id)
        if not can_manage_course(user, course):
            logger.warning(f"User {user.id} refused topic creation on course {course_id}")
            raise ForbiddenError()

        return await self.topic_repo.create(course_id=course_id, **data.model_dump())

    async def create_content_item(
        self,
        user: User,
        topic_id: UUID,
        data: ContentItemCreate
    ) -> ContentItem:
        topic = await self._get_managed_topic(user, topic_id)
        return await self.content_item_repo.create(topic_id=topic.id, **data.model_dump())

    async def update_topic(self, user: User, topic_id: UUID, data: TopicUpdate) -> Topic:
        topic = await self._get_managed_topic(user, topic_id)
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return topic
        return await self.topic_repo.update(topic_id, **update_data)

    async def delete_topic(self, user: User, topic_id: UUID) -> bool:
        """Delete a topic with its content items, their quizzes and progress."""
        await self._get_managed_topic(user, topic_id)
        logger.info(f"Topic deleted: {topic_id} by {user.id}")
        return await self.topic_repo.delete(topic_id)

    async def update_content_item(
        self,
        user: User,
        content_item_id: UUID,
        data: ContentItemUpdate
    ) -> ContentItem:
        item = await self._get_managed_content_item(user, content_item_id)
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return item
        return await self.content_item_repo.update(content_item_id, **update_data)

    async def delete_content_item(self, user: User, content_item_id: UUID) -> bool:
        await self._get_managed_content_item(user, content_item_id)
        logger.info(f"Content item deleted: {content_item_id} by {user.id}")
        return await self.content_item_repo.delete(content_item_id)

    async def get_content_item(self, content_item_id: UUID) -> ContentItem:
        item = await self.content_item_repo.get_with_course(content_item_id)
        if not item:
            raise NotFoundError("Content item not found")
        return item

    async def resolve_course_for_content_item(self, content_item_id: UUID) -> Course:
        """content item -> topic -> course"""
        item = await self.get_content_item(content_item_id)
        return item.topic.course
