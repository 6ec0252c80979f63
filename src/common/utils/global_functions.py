# common/utils/global_functions.py
import re
from typing import Optional, Union

from src.common.errors import invalid_input
from src.common.utils.global_messages import GlobalMessages

_DIGITS = re.compile(r"[0-9]+")
_SIGNED_DIGITS = re.compile(r"[+-]?[0-9]+")

MIN_YEAR = 1
MAX_YEAR = 9999

def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()

def parse_positive_id(raw, not_integer_message: str, not_positive_message: str) -> int:
    """
    Parse a caller-supplied identifier that must be a positive integer.

    Accepts ints or strings (surrounding whitespace ignored). Raises an
    INVALID_INPUT ForumError with the matching message otherwise.
    """
    if isinstance(raw, bool):
        raise invalid_input(not_integer_message)
    if isinstance(raw, int):
        value = raw
    else:
        text = "" if raw is None else str(raw).strip()
        if not _SIGNED_DIGITS.fullmatch(text):
            raise invalid_input(not_integer_message)
        value = int(text)
    if value <= 0:
        raise invalid_input(not_positive_message)
    return value

def parse_course_id(raw) -> int:
    return parse_positive_id(
        raw,
        GlobalMessages.COURSE_ID_NOT_INTEGER,
        GlobalMessages.COURSE_ID_NOT_POSITIVE,
    )

def parse_topic_id(raw) -> int:
    return parse_positive_id(raw, GlobalMessages.TOPIC_ID_INVALID, GlobalMessages.TOPIC_ID_INVALID)

def parse_solution_flag(raw) -> bool:
    """Only "true" or "false" (any case, trimmed) are accepted."""
    if isinstance(raw, bool):
        return raw
    value = raw.strip().lower() if isinstance(raw, str) else None
    if value == "true":
        return True
    if value == "false":
        return False
    raise invalid_input(GlobalMessages.SOLUTION_FLAG_INVALID)

def parse_year(raw: Union[str, int, None]) -> int:
    if isinstance(raw, int) and not isinstance(raw, bool):
        raw = str(raw)
    if not isinstance(raw, str) or is_blank(raw):
        raise invalid_input(GlobalMessages.YEAR_REQUIRED)
    value = raw.strip()
    if not _DIGITS.fullmatch(value):
        raise invalid_input(GlobalMessages.YEAR_NOT_DIGITS)
    # Digit count is checked before int() is called.
    if len(value.lstrip("0")) > len(str(MAX_YEAR)) or not MIN_YEAR <= int(value) <= MAX_YEAR:
        raise invalid_input(GlobalMessages.YEAR_OUT_OF_RANGE.format(min_year=MIN_YEAR, max_year=MAX_YEAR))
    return int(value)

