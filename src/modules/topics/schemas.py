# src/modules/topics/schemas.py

from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from src.models.models import Topic, TopicStatus

class TopicCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    body: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1, max_length=100)
    # Parsed by the lifecycle service into a positive integer.
    course_id: Union[int, str]

class TopicUpdateRequest(BaseModel):
    id: Optional[int] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    body: Optional[str] = Field(None, min_length=1)
    created_at: Optional[datetime] = None
    status: Optional[TopicStatus] = None
    author: Optional[str] = Field(None, min_length=1, max_length=100)
    course_id: Optional[Union[int, str]] = None

class TopicSearchRequest(BaseModel):
    # Field names follow the public contract of POST /topicos/buscar.
    model_config = ConfigDict(populate_by_name=True)

    course_name: Optional[str] = Field(None, alias="nombreCurso", pattern=r"^[a-zA-ZÀ-ÿ\s]*$")
    year: Optional[Union[str, int]] = Field(None, alias="ano")

class SolutionRequest(BaseModel):
    topic_id: int
    message: Optional[str] = None
    author: Optional[str] = Field(None, pattern=r"^[a-zA-ZÀ-ÿ\s]*$")
    solution: Union[bool, str]

class TopicDetailResponse(BaseModel):
    id: int
    title: str
    body: str
    created_at: datetime
    status: TopicStatus
    author: str
    course_name: Optional[str] = None
    solution: Optional[str] = None

class TopicListResponse(BaseModel):
    id: int
    title: str
    body: str
    created_at: datetime
    status: TopicStatus
    author: str
    course_id: Optional[int] = None
    course_name: Optional[str] = None
    course_category: Optional[str] = None

class TopicWithSolutionResponse(TopicListResponse):
    solution_id: Optional[int] = None
    solution_message: Optional[str] = None
    solution_created_at: Optional[datetime] = None
    solution_author: Optional[str] = None

def solution_of(topic: Topic):
    """First reply flagged as solution on a deep-loaded topic, or None."""
    return next((reply for reply in topic.replies if reply.is_solution), None)

def to_detail(topic: Topic, with_solution: bool = False) -> TopicDetailResponse:
    solution = solution_of(topic) if with_solution else None
    return TopicDetailResponse(
        id=topic.id,
        title=topic.title,
        body=topic.body,
        created_at=topic.created_at,
        status=topic.status,
        author=topic.author,
        course_name=topic.course.name if topic.course else None,
        solution=solution.message if solution else None,
    )

def to_list_item(topic: Topic) -> TopicListResponse:
    course = topic.course
    return TopicListResponse(
        id=topic.id,
        title=topic.title,
        body=topic.body,
        created_at=topic.created_at,
        status=topic.status,
        author=topic.author,
        course_id=course.id if course else None,
        course_name=course.name if course else None,
        course_category=course.category if course else None,
    )

def to_with_solution(topic: Topic) -> TopicWithSolutionResponse:
    solution = solution_of(topic)
    return TopicWithSolutionResponse(
        **to_list_item(topic).model_dump(),
        solution_id=solution.id if solution else None,
        solution_message=solution.message if solution else None,
        solution_created_at=solution.created_at if solution else None,
        solution_author=solution.author if solution else None,
    )
