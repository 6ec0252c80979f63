# src/modules/topics/topic_service.py

"""
Topic Store: persistence of topics and their status.

Every read applies an explicit `Topic.active` predicate; nothing relies on a
global soft-delete filter. Functions only flush, the caller owns the commit.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import extract
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from src.common.errors import conflict, not_found
from src.common.pagination import Page, PageParams, paginate
from src.common.utils.global_messages import GlobalMessages
from src.models.models import Course, Topic, TopicStatus
from src.modules.courses import course_service

logger = logging.getLogger(__name__)

def _active():
    return Topic.active.is_(True)

def _newest_first(stmt):
    return stmt.order_by(Topic.created_at.desc(), Topic.id.desc())

async def exists_active(title: str, body: str, db: AsyncSession, exclude_id: Optional[int] = None) -> bool:
    stmt = select(Topic.id).where(_active(), Topic.title == title, Topic.body == body)
    if exclude_id is not None:
        stmt = stmt.where(Topic.id != exclude_id)
    result = await db.execute(stmt)
    return result.first() is not None

async def create(title: str, body: str, author: str, course_id: int, db: AsyncSession) -> Topic:
    """
    Create an OPEN, active topic bound to an existing course.
    """
    if await exists_active(title, body, db):
        raise conflict(GlobalMessages.TOPIC_ALREADY_EXISTS)
    course = await course_service.find_by_id(course_id, db)

    topic = Topic(
        title=title,
        body=body,
        author=author,
        course=course,
        created_at=datetime.now(timezone.utc),
        status=TopicStatus.OPEN,
        active=True,
        replies=[],
    )
    db.add(topic)
    try:
        await db.flush()
    except IntegrityError:
        raise conflict(GlobalMessages.TOPIC_ALREADY_EXISTS)
    return topic

async def find_by_id(
    topic_id: int,
    db: AsyncSession,
    include_replies: bool = False,
    lock: bool = False,
) -> Topic:
    """
    Load an active topic.

    Shallow by default (topic + course). `include_replies=True` loads the reply
    collection, which every solution check needs. `lock=True` takes a row lock
    for the rest of the transaction.
    """
    stmt = select(Topic).where(Topic.id == topic_id, _active())
    if include_replies:
        stmt = stmt.options(selectinload(Topic.replies))
        # Refresh an identity-mapped instance whose replies may be stale.
        stmt = stmt.execution_options(populate_existing=True)
    if lock:
        stmt = stmt.with_for_update(of=Topic)
    result = await db.execute(stmt)
    topic = result.unique().scalars().first()
    if not topic:
        raise not_found(GlobalMessages.TOPIC_NOT_FOUND)
    return topic

async def find_page(
    db: AsyncSession,
    params: PageParams,
    course_name: Optional[str] = None,
    year: Optional[int] = None,
) -> Page:
    """
    Page through active topics, newest first.

    `course_name` matches case-insensitively; `year` matches the calendar year
    of `created_at`. Both filters are optional and independent.
    """
    stmt = select(Topic).join(Course, Topic.course_id == Course.id).where(_active())
    if course_name:
        stmt = stmt.where(course_service.name_matches(course_name))
    if year is not None:
        stmt = stmt.where(extract("year", Topic.created_at) == year)
    return await paginate(db, _newest_first(stmt), params)

async def find_resolved_page(db: AsyncSession, params: PageParams, with_replies: bool = False) -> Page:
    """
    Page through resolved topics. Topic.status is the single source of truth
    for "resolved"; the reply flag only feeds the solution text.
    """
    stmt = select(Topic).where(_active(), Topic.status == TopicStatus.RESOLVED)
    if with_replies:
        stmt = stmt.options(selectinload(Topic.replies)).execution_options(populate_existing=True)
    return await paginate(db, _newest_first(stmt), params)

async def update(topic_id: int, changes: dict, db: AsyncSession) -> Topic:
    """
    Apply the non-null fields of `changes` to an active topic.

    Recognised keys: title, body, created_at, status, author, course_id.
    """
    topic = await find_by_id(topic_id, db)

    # Check uniqueness before touching the instance so autoflush never sees a duplicate.
    new_title = changes.get("title") if changes.get("title") is not None else topic.title
    new_body = changes.get("body") if changes.get("body") is not None else topic.body
    if (new_title, new_body) != (topic.title, topic.body):
        if await exists_active(new_title, new_body, db, exclude_id=topic.id):
            raise conflict(GlobalMessages.TOPIC_ALREADY_EXISTS)

    if changes.get("course_id") is not None:
        topic.course = await course_service.find_by_id(changes["course_id"], db)

    for key in ("title", "body", "created_at", "status", "author"):
        value = changes.get(key)
        if value is not None:
            setattr(topic, key, value)

    try:
        await db.flush()
    except IntegrityError:
        raise conflict(GlobalMessages.TOPIC_ALREADY_EXISTS)
    return topic

async def soft_delete(topic_id: int, db: AsyncSession) -> None:
    """
    Mark a topic inactive. Deleting an already inactive topic is a no-op.
    """
    # The only read that deliberately ignores the active flag.
    result = await db.execute(select(Topic).where(Topic.id == topic_id))
    topic = result.unique().scalars().first()
    if not topic:
        raise not_found(GlobalMessages.TOPIC_NOT_FOUND)
    if topic.active:
        topic.active = False
        await db.flush()
        logger.info(f"Topic {topic_id} soft-deleted")

def mark_resolved(topic: Topic) -> None:
    """The only automatic transition: OPEN -> RESOLVED. Never reverts."""
    if topic.status != TopicStatus.RESOLVED:
        topic.status = TopicStatus.RESOLVED
        logger.info(f"Topic {topic.id} resolved")
