# src/modules/courses/course_controller.py

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.dependencies import get_current_user
from src.common.database.database import get_db_session, transaction
from src.models.models import User
from src.modules.courses import course_service, schemas

router = APIRouter(prefix="/cursos", tags=["courses"])

# POST /cursos – Register a new course.
@router.post("", response_model=schemas.CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    course_data: schemas.CourseCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Register a course. Names must be unique.

    - **name**: Letters and spaces only.
    - **category**: Letters and spaces only.
    """
    async with transaction(db):
        course = await course_service.register(course_data.name, course_data.category, db)
    return course

# GET /cursos – List every course.
@router.get("", response_model=List[schemas.CourseResponse])
async def get_courses(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await course_service.list_all(db)

# GET /cursos/{course_id} – Retrieve a course by its ID.
@router.get("/{course_id}", response_model=schemas.CourseResponse)
async def get_course(
    course_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await course_service.find_by_id(course_id, db)
