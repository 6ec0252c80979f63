# src/modules/replies/reply_service.py

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from src.common.errors import conflict, rule_violation
from src.common.utils.global_messages import GlobalMessages
from src.models.models import Reply, Topic
from src.modules.topics import topic_rules, topic_service

logger = logging.getLogger(__name__)

async def exists(message: str, author: str, topic_id: int, db: AsyncSession) -> bool:
    result = await db.execute(
        select(Reply.id).where(
            Reply.message == message,
            Reply.author == author,
            Reply.topic_id == topic_id,
        )
    )
    return result.first() is not None

async def add(topic: Topic, message: str, author: str, is_solution: bool, db: AsyncSession) -> Reply:
    """
    Store a reply on a deep-loaded topic.

    The message-quality rule always applies; solution replies must also pass
    the self-solution and single-solution rules. Only flushes.
    """
    if is_solution:
        topic_rules.check_solution(topic, message, author)
    else:
        topic_rules.check_message_quality(message)

    if await exists(message, author, topic.id, db):
        raise conflict(GlobalMessages.REPLY_ALREADY_EXISTS)

    reply = Reply(
        message=message,
        author=author,
        created_at=datetime.now(timezone.utc),
        is_solution=is_solution,
        active=True,
        topic_id=topic.id,
    )
    db.add(reply)
    try:
        await db.flush()
    except IntegrityError:
        # A concurrent request committed first; the unique indexes decide who won.
        if is_solution:
            raise rule_violation(topic_rules.SOLUTION_EXISTS, GlobalMessages.SOLUTION_EXISTS)
        raise conflict(GlobalMessages.REPLY_ALREADY_EXISTS)
    logger.info(f"Reply {reply.id} added to topic {topic.id} by {author} (solution={is_solution})")
    return reply

async def list_by_topic(topic_id: int, db: AsyncSession) -> List[Reply]:
    await topic_service.find_by_id(topic_id, db)
    result = await db.execute(
        select(Reply)
        .where(Reply.topic_id == topic_id, Reply.active.is_(True))
        .order_by(Reply.created_at, Reply.id)
    )
    return list(result.scalars().all())

async def list_solutions_by_topic(topic_id: int, db: AsyncSession) -> List[Reply]:
    """
    Solution replies of a topic. Returned as a list so a second
    stored solution would show up instead of being hidden.
    """
    await topic_service.find_by_id(topic_id, db)
    result = await db.execute(
        select(Reply)
        .where(Reply.topic_id == topic_id, Reply.is_solution.is_(True))
        .order_by(Reply.id)
    )
    return list(result.scalars().all())
