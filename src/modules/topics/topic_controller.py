# src/modules/topics/topic_controller.py

from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.dependencies import get_current_user
from src.common.database.database import get_db_session
from src.common.pagination import Page, PageParams, page_params
from src.common.utils.global_functions import MAX_YEAR, MIN_YEAR
from src.models.models import User
from src.modules.topics import schemas, topic_lifecycle_service

router = APIRouter(prefix="/topicos", tags=["topics"])

# POST /topicos – Register a new topic.
@router.post("", response_model=schemas.TopicDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_topic(
    topic: schemas.TopicCreateRequest,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Register a topic in a course.

    - **title**: At least 10 characters.
    - **body**: At least 20 characters. (title, body) must be unique.
    - **author**: Name of the author.
    - **course_id**: Positive integer of an existing course.
    """
    created = await topic_lifecycle_service.register_topic(
        topic.title, topic.body, topic.author, topic.course_id, current_user, db
    )
    response.headers["Location"] = f"/topicos/{created.id}"
    return created

# GET /topicos – List topics, optionally filtered by course name and year.
@router.get("", response_model=Page[schemas.TopicListResponse])
async def get_topics(
    nombreCurso: Optional[str] = Query(None, description="Course name, case-insensitive."),
    ano: Optional[int] = Query(None, ge=MIN_YEAR, le=MAX_YEAR, description="Calendar year of creation."),
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await topic_lifecycle_service.list_topics(params, db, course_name=nombreCurso, year=ano)

# POST /topicos/buscar – Strict search; both filters required, 404 when nothing matches.
@router.post("/buscar", response_model=Page[schemas.TopicListResponse])
async def search_topics(
    filters: schemas.TopicSearchRequest,
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await topic_lifecycle_service.search_by_filter(filters.course_name, filters.year, params, db)

# GET /topicos/con-solucion – Resolved topics.
@router.get("/con-solucion", response_model=Page[schemas.TopicListResponse])
async def get_resolved_topics(
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await topic_lifecycle_service.list_resolved(params, db)

# GET /topicos/con-solucion-detallada – Resolved topics with their solution reply.
@router.get("/con-solucion-detallada", response_model=Page[schemas.TopicWithSolutionResponse])
async def get_resolved_topics_with_solution(
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await topic_lifecycle_service.list_resolved_with_solution(params, db)

# POST /topicos/soluciones – Write the solution of a topic.
@router.post("/soluciones", response_model=schemas.TopicDetailResponse)
async def accept_solution(
    data: schemas.SolutionRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Post a reply flagged as the solution; the topic becomes RESOLVED.

    The topic author cannot solve their own topic and only one solution is allowed.
    """
    return await topic_lifecycle_service.accept_solution(
        data.topic_id, data.message, data.author, data.solution, current_user, db
    )

# GET /topicos/soluciones/{topic_id} – Topic detail including its solution text.
@router.get("/soluciones/{topic_id}", response_model=schemas.TopicDetailResponse)
async def get_topic_with_solution(
    topic_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await topic_lifecycle_service.get_topic_with_solution(topic_id, db)

# GET /topicos/{topic_id} – Topic detail without replies.
@router.get("/{topic_id}", response_model=schemas.TopicDetailResponse)
async def get_topic(
    topic_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await topic_lifecycle_service.get_topic(topic_id, db)

# PUT /topicos – Partial update; only non-null fields are applied.
@router.put("", response_model=schemas.TopicDetailResponse)
async def update_topic(
    changes: schemas.TopicUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await topic_lifecycle_service.update_topic(changes.model_dump(), current_user, db)

# DELETE /topicos/{topic_id} – Soft delete.
@router.delete("/{topic_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_topic(
    topic_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    await topic_lifecycle_service.delete_topic(topic_id, current_user, db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
