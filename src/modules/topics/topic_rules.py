# src/modules/topics/topic_rules.py

"""
Business rules guarding topic resolution.

Pure checks over already-loaded Topic/Reply state. They never touch the
database; callers must pass a topic whose replies were loaded (deep retrieval).
"""

from typing import Optional

from src.common.errors import rule_violation
from src.common.utils.global_messages import GlobalMessages
from src.models.models import Topic

MIN_MESSAGE_LENGTH = 20
MIN_TITLE_LENGTH = 10

SOLUTION_EXISTS = "solution-exists"
SELF_SOLUTION = "self-solution"
MESSAGE_TOO_SHORT = "message-too-short"
TITLE_TOO_SHORT = "title-too-short"

def check_unique_solution(topic: Topic) -> None:
    """A topic can only ever have one reply flagged as its solution."""
    if any(reply.is_solution for reply in topic.replies):
        raise rule_violation(SOLUTION_EXISTS, GlobalMessages.SOLUTION_EXISTS)

def check_author_not_self(topic: Topic, reply_author: str) -> None:
    """The topic author cannot mark their own reply as the solution."""
    if (topic.author or "").casefold() == (reply_author or "").casefold():
        raise rule_violation(SELF_SOLUTION, GlobalMessages.SELF_SOLUTION)

def check_message_quality(message: Optional[str], title: Optional[str] = None) -> None:
    if message is None or len(message) < MIN_MESSAGE_LENGTH:
        raise rule_violation(
            MESSAGE_TOO_SHORT,
            GlobalMessages.MESSAGE_TOO_SHORT.format(min_length=MIN_MESSAGE_LENGTH),
        )
    if title is not None and len(title) < MIN_TITLE_LENGTH:
        raise rule_violation(
            TITLE_TOO_SHORT,
            GlobalMessages.TITLE_TOO_SHORT.format(min_length=MIN_TITLE_LENGTH),
        )

def check_solution(topic: Topic, message: str, reply_author: str) -> None:
    """Every check a reply must pass before it is stored as the solution."""
    check_message_quality(message)
    check_author_not_self(topic, reply_author)
    check_unique_solution(topic)
