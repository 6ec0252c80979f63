# src/modules/courses/schemas.py

from typing import Annotated
from pydantic import BaseModel, Field, StringConstraints

# Letters (accented ones included) and spaces only.
LETTERS_AND_SPACES = r"^[a-zA-ZÀ-ÿ\s]+$"

CourseText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255, pattern=LETTERS_AND_SPACES)]

class CourseResponse(BaseModel):
    id: int
    name: str
    category: str

    class Config:
        from_attributes = True

class CourseCreateRequest(BaseModel):
    name: CourseText = Field(..., description="Course name, letters and spaces only.")
    category: CourseText = Field(..., description="Course category, letters and spaces only.")
