# src/modules/replies/schemas.py

from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel, Field

class ReplyCreateRequest(BaseModel):
    message: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-zA-ZÀ-ÿ\s]+$")
    # "true" or "false" (any case); anything else is rejected by the service.
    solution: Union[bool, str] = "false"

class ReplyResponse(BaseModel):
    id: int
    message: str
    created_at: datetime
    author: str
    is_solution: bool
    topic_id: int

    class Config:
        from_attributes = True
