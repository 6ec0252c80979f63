# src/auth/auth_controller.py

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import auth_service, schemas
from src.common.config import settings
from src.common.database.database import get_db_session
from src.common.rate_limit import limiter
from src.common.utils.global_messages import GlobalMessages

router = APIRouter(prefix="/login", tags=["auth"])

@router.post("", response_model=schemas.TokenResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    credentials: schemas.LoginRequest,
    db: AsyncSession = Depends(get_db_session)
):
    """
    Authenticate a user and return a bearer token.

    - **login**: The user's login.
    - **password**: The user's password.
    """
    access_token = await auth_service.login_user(credentials.login, credentials.password, db)
    if not access_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=GlobalMessages.INVALID_CREDENTIALS
        )
    return schemas.TokenResponse(access_token=access_token)
