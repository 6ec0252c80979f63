# src/modules/courses/course_service.py

import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from src.common.errors import conflict, not_found
from src.common.utils.global_messages import GlobalMessages
from src.models.models import Course

logger = logging.getLogger(__name__)

async def list_all(db: AsyncSession) -> List[Course]:
    result = await db.execute(select(Course).order_by(Course.id))
    return list(result.scalars().all())

async def find_by_id(course_id: int, db: AsyncSession) -> Course:
    result = await db.execute(select(Course).where(Course.id == course_id))
    course = result.scalars().first()
    if not course:
        raise not_found(GlobalMessages.COURSE_NOT_FOUND)
    return course

async def name_exists(name: str, db: AsyncSession) -> bool:
    result = await db.execute(select(Course.id).where(Course.name == name))
    return result.first() is not None

def name_matches(name: str):
    """Case-insensitive course name predicate shared by every search path."""
    return func.lower(Course.name) == name.strip().lower()

async def name_exists_ignoring_case(name: str, db: AsyncSession) -> bool:
    result = await db.execute(select(Course.id).where(name_matches(name)))
    return result.first() is not None

async def register(name: str, category: str, db: AsyncSession) -> Course:
    """
    Create a new course. Names are unique (exact match).
    """
    if await name_exists(name, db):
        raise conflict(GlobalMessages.COURSE_ALREADY_EXISTS)
    course = Course(name=name, category=category)
    db.add(course)
    try:
        await db.flush()
    except IntegrityError:
        # Lost a race against a concurrent registration of the same name.
        raise conflict(GlobalMessages.COURSE_ALREADY_EXISTS)
    logger.info(f"Registered course {course.id} '{course.name}'")
    return course
