# src/auth/auth_service.py

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession
from passlib.context import CryptContext

from src.common.config import settings
from src.models.models import User

logger = logging.getLogger(__name__)

# Initialize the password context (bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify that the provided password matches the hashed password."""
    return pwd_context.verify(plain_password, hashed_password)

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT token including issuer and expiration date."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta if expires_delta else timedelta(minutes=15))
    to_encode.update({"exp": expire, "iss": settings.JWT_ISSUER})
    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return encoded_jwt

async def create_user(login: str, password: str, db: AsyncSession) -> User:
    user = User(login=login, password_hash=hash_password(password))
    db.add(user)
    await db.flush()
    return user

async def authenticate_user(login: str, password: str, db: AsyncSession) -> Optional[User]:
    """Return the user when the login exists and the password matches, else None."""
    result = await db.execute(select(User).where(User.login == login))
    user = result.scalars().first()
    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login attempt for '{login}'")
        return None
    return user

async def login_user(login: str, password: str, db: AsyncSession) -> Optional[str]:
    """Authenticate a user and return a JWT access token if successful."""
    user = await authenticate_user(login, password, db)
    if not user:
        return None
    access_token_expires = timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    logger.info(f"User '{user.login}' logged in")
    return create_access_token(data={"sub": user.login}, expires_delta=access_token_expires)
