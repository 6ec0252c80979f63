# src/modules/replies/reply_controller.py

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.dependencies import get_current_user
from src.common.database.database import get_db_session
from src.models.models import User
from src.modules.replies import schemas
from src.modules.topics import topic_lifecycle_service

router = APIRouter(prefix="/topicos", tags=["replies"])

# POST /topicos/{topic_id}/respuestas – Post a reply, optionally as the solution.
@router.post("/{topic_id}/respuestas", response_model=schemas.ReplyResponse, status_code=status.HTTP_201_CREATED)
async def create_reply(
    topic_id: int,
    reply: schemas.ReplyCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Add a reply to a topic.

    - **message**: At least 20 characters.
    - **author**: Letters and spaces only.
    - **solution**: "true" or "false". A solution reply resolves the topic.
    """
    return await topic_lifecycle_service.post_reply(
        topic_id, reply.message, reply.author, reply.solution, current_user, db
    )

# GET /topicos/{topic_id}/respuestas – List the replies of a topic.
@router.get("/{topic_id}/respuestas", response_model=List[schemas.ReplyResponse])
async def get_replies(
    topic_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await topic_lifecycle_service.list_replies(topic_id, db)

# GET /topicos/{topic_id}/respuestas/soluciones – Replies flagged as the solution.
@router.get("/{topic_id}/respuestas/soluciones", response_model=List[schemas.ReplyResponse])
async def get_solution_replies(
    topic_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await topic_lifecycle_service.list_solutions(topic_id, db)
