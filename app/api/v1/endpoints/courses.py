"""
Catalog Endpoints

Endpoints:
----------
- GET    /courses                              - List the catalog
- POST   /courses                              - Create a course (admin)
- GET    /courses/{course_id}                  - Course with topics and content items
- PUT    /courses/{course_id}                  - Edit a course (admin)
- DELETE /courses/{course_id}                  - Delete a course (admin)
- POST   /courses/{course_id}/topics           - Add a topic
- PUT    /topics/{topic_id}                    - Edit a topic
- DELETE /topics/{topic_id}                    - Delete a topic
- POST   /topics/{topic_id}/content-items      - Add a content item
- GET    /content-items/{content_item_id}      - Get a content item
- PUT    /content-items/{content_item_id}      - Edit a content item
- DELETE /content-items/{content_item_id}      - Delete a content item
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.api.deps import get_current_active_user, require_roles
from app.models.user import User
from app.models.user_role import RoleName
from app.schemas.course import (
    CourseCreate,
    CourseUpdate,
    CourseResponse,
    CourseOutlineResponse,
    TopicCreate,
    TopicUpdate,
    TopicResponse,
    ContentItemCreate,
    ContentItemUpdate,
    ContentItemResponse,
)
from app.services.catalog_service import CatalogService, is_admin

router = APIRouter(tags=["Catalog"])

course_managers = require_roles(RoleName.ADMIN.value, RoleName.INSTRUCTOR.value)


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


# ============================================================
# COURSES
# ============================================================

@router.get("/courses", response_model=List[CourseResponse])
async def list_courses(
    include_inactive: bool = Query(False),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200),
    current_user: User = Depends(get_current_active_user),
    service: CatalogService = Depends(get_catalog_service),
):
    # Only admins see retired courses
    return await service.list_courses(
        include_inactive=include_inactive and is_admin(current_user),
        skip=skip,
        limit=limit,
    )


@router.post(
    "/courses",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_course(
    data: CourseCreate,
    current_user: User = Depends(require_roles(RoleName.ADMIN.value)),
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.create_course(current_user, data)


@router.get("/courses/{course_id}", response_model=CourseOutlineResponse)
async def get_course(
    course_id: UUID,
    current_user: User = Depends(get_current_active_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.get_course_outline(course_id)


@router.put("/courses/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: UUID,
    data: CourseUpdate,
    current_user: User = Depends(require_roles(RoleName.ADMIN.value)),
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.update_course(current_user, course_id, data)


@router.delete("/courses/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(
    course_id: UUID,
    current_user: User = Depends(require_roles(RoleName.ADMIN.value)),
    service: CatalogService = Depends(get_catalog_service),
):
    await service.delete_course(current_user, course_id)


# ============================================================
# TOPICS & CONTENT ITEMS
# ============================================================

@router.post(
    "/courses/{course_id}/topics",
    response_model=TopicResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_topic(
    course_id: UUID,
    data: TopicCreate,
    current_user: User = Depends(course_managers),
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.create_topic(current_user, course_id, data)


@router.post(
    "/topics/{topic_id}/content-items",
    response_model=ContentItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_content_item(
    topic_id: UUID,
    data: ContentItemCreate,
    current_user: User = Depends(course_managers),
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.create_content_item(current_user, topic_id, data)


@router.get("/content-items/{content_item_id}", response_model=ContentItemResponse)
async def get_content_item(
    content_item_id: UUID,
    current_user: User = Depends(get_current_active_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.get_content_item(content_item_id)


@router.put("/topics/{topic_id}", response_model=TopicResponse)
async def update_topic(
    topic_id: UUID,
    data: TopicUpdate,
    current_user: User = Depends(course_managers),
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.update_topic(current_user, topic_id, data)


@router.delete("/topics/{topic_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_topic(
    topic_id: UUID,
    current_user: User = Depends(course_managers),
    service: CatalogService = Depends(get_catalog_service),
):
    await service.delete_topic(current_user, topic_id)


@router.put("/content-items/{content_item_id}", response_model=ContentItemResponse)
async def update_content_item(
    content_item_id: UUID,
    data: ContentItemUpdate,
    current_user: User = Depends(course_managers),
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.update_content_item(current_user, content_item_id, data)


@router.delete("/content-items/{content_item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_content_item(
    content_item_id: UUID,
    current_user: User = Depends(course_managers),
    service: CatalogService = Depends(get_catalog_service),
):
    await service.delete_content_item(current_user, content_item_id)
