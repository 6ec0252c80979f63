# src/modules/topics/topic_lifecycle_service.py

"""
Topic lifecycle orchestration.

Each public write runs inside one transaction: it either commits completely
or rolls back completely. The authenticated principal is passed explicitly
to every write.
"""

import logging
from typing import List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from src.common.database.database import transaction
from src.common.errors import invalid_input, not_found
from src.common.pagination import Page, PageParams
from src.common.utils.global_functions import (
    is_blank,
    parse_course_id,
    parse_solution_flag,
    parse_topic_id,
    parse_year,
)
from src.common.utils.global_messages import GlobalMessages
from src.models.models import Reply, User
from src.modules.courses import course_service
from src.modules.replies import reply_service
from src.modules.topics import schemas, topic_rules, topic_service

logger = logging.getLogger(__name__)

async def register_topic(
    title: str,
    body: str,
    author: str,
    course_id_raw: Union[int, str],
    principal: User,
    db: AsyncSession,
) -> schemas.TopicDetailResponse:
    course_id = parse_course_id(course_id_raw)
    topic_rules.check_message_quality(body, title)
    async with transaction(db):
        topic = await topic_service.create(title, body, author, course_id, db)
    logger.info(f"Topic {topic.id} registered by {principal.login} in course {course_id}")
    return schemas.to_detail(topic)

async def _add_reply(
    topic_id: int,
    message: Optional[str],
    author: Optional[str],
    solution_flag_raw: Union[bool, str],
    principal: User,
    db: AsyncSession,
) -> Reply:
    is_solution = parse_solution_flag(solution_flag_raw)
    if is_solution:
        if is_blank(message):
            raise invalid_input(GlobalMessages.SOLUTION_MESSAGE_REQUIRED)
        if is_blank(author):
            raise invalid_input(GlobalMessages.SOLUTION_AUTHOR_REQUIRED)
    elif is_blank(author):
        author = principal.login

    async with transaction(db):
        # The row lock serialises concurrent acceptances on the same topic.
        topic = await topic_service.find_by_id(topic_id, db, include_replies=True, lock=is_solution)
        reply = await reply_service.add(topic, message, author, is_solution, db)
        if is_solution:
            topic_service.mark_resolved(topic)
            await db.flush()
    logger.info(f"{principal.login} replied to topic {topic_id} (solution={is_solution})")
    return reply

async def accept_solution(
    topic_id: int,
    message: Optional[str],
    author: Optional[str],
    solution_flag_raw: Union[bool, str],
    principal: User,
    db: AsyncSession,
) -> schemas.TopicDetailResponse:
    """
    Post a reply and, when flagged, accept it as the topic's solution.

    Returns the refreshed topic including the solution text.
    """
    await _add_reply(topic_id, message, author, solution_flag_raw, principal, db)
    return await get_topic_with_solution(topic_id, db)

async def post_reply(
    topic_id: int,
    message: Optional[str],
    author: Optional[str],
    solution_flag_raw: Union[bool, str],
    principal: User,
    db: AsyncSession,
) -> Reply:
    return await _add_reply(topic_id, message, author, solution_flag_raw, principal, db)

async def update_topic(changes: dict, principal: User, db: AsyncSession) -> schemas.TopicDetailResponse:
    """
    Partially update a topic. `changes["id"]` is required; other None values are ignored.
    """
    if changes.get("id") is None:
        raise invalid_input(GlobalMessages.TOPIC_ID_INVALID)
    topic_id = parse_topic_id(changes["id"])
    fields = dict(changes)
    if fields.get("course_id") is not None:
        fields["course_id"] = parse_course_id(fields["course_id"])
    if fields.get("body") is not None:
        topic_rules.check_message_quality(fields["body"])

    async with transaction(db):
        topic = await topic_service.update(topic_id, fields, db)
    logger.info(f"Topic {topic_id} updated by {principal.login}")
    # Status may have been overridden directly; the reply-derived solution is not consulted here.
    return schemas.to_detail(topic)

async def delete_topic(topic_id_raw: Union[int, str], principal: User, db: AsyncSession) -> None:
    topic_id = parse_topic_id(topic_id_raw)
    async with transaction(db):
        await topic_service.soft_delete(topic_id, db)
    logger.info(f"Topic {topic_id} deleted by {principal.login}")

async def search_by_filter(
    course_name: Optional[str],
    year_raw: Union[str, int, None],
    params: PageParams,
    db: AsyncSession,
) -> Page:
    """
    Strict search: both filters are required and an empty result is NOT_FOUND.
    """
    if is_blank(course_name):
        raise invalid_input(GlobalMessages.COURSE_NAME_REQUIRED)
    year = parse_year(year_raw)
    course_name = course_name.strip()

    page = await topic_service.find_page(db, params, course_name=course_name, year=year)
    if page.is_empty:
        if not await course_service.name_exists_ignoring_case(course_name, db):
            raise not_found(GlobalMessages.COURSE_NAME_UNKNOWN)
        raise not_found(GlobalMessages.NO_TOPICS_FOR_FILTER.format(course_name=course_name, year=year))
    return page.map(schemas.to_list_item)

async def list_topics(
    params: PageParams,
    db: AsyncSession,
    course_name: Optional[str] = None,
    year: Optional[int] = None,
) -> Page:
    page = await topic_service.find_page(db, params, course_name=course_name or None, year=year)
    return page.map(schemas.to_list_item)

async def list_resolved(params: PageParams, db: AsyncSession) -> Page:
    page = await topic_service.find_resolved_page(db, params)
    return page.map(schemas.to_list_item)

async def list_resolved_with_solution(params: PageParams, db: AsyncSession) -> Page:
    page = await topic_service.find_resolved_page(db, params, with_replies=True)
    return page.map(schemas.to_with_solution)

async def get_topic(topic_id_raw: Union[int, str], db: AsyncSession) -> schemas.TopicDetailResponse:
    topic = await topic_service.find_by_id(parse_topic_id(topic_id_raw), db)
    return schemas.to_detail(topic)

async def get_topic_with_solution(topic_id_raw: Union[int, str], db: AsyncSession) -> schemas.TopicDetailResponse:
    topic = await topic_service.find_by_id(parse_topic_id(topic_id_raw), db, include_replies=True)
    return schemas.to_detail(topic, with_solution=True)

async def list_replies(topic_id: int, db: AsyncSession) -> List[Reply]:
    return await reply_service.list_by_topic(topic_id, db)

async def list_solutions(topic_id: int, db: AsyncSession) -> List[Reply]:
    return await reply_service.list_solutions_by_topic(topic_id, db)
