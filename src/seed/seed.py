import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from src.auth.auth_service import hash_password
from src.common.config import settings
from src.common.database.database import async_session, connect_to_db, close_db_connection
from src.models.models import Course, User

logger = logging.getLogger(__name__)

courses_data = [
    {"name": "Java", "category": "Programacion"},
    {"name": "Python", "category": "Programacion"},
    {"name": "Spring Boot", "category": "Backend"},
    {"name": "Bases de Datos", "category": "Datos"},
]

async def seed_user(session: AsyncSession):
    """
    Create the login user from settings unless it already exists.
    """
    result = await session.execute(select(User).where(User.login == settings.SEED_USER_LOGIN))
    if result.scalars().first():
        return
    session.add(User(login=settings.SEED_USER_LOGIN, password_hash=hash_password(settings.SEED_USER_PASSWORD)))
    logger.info(f"Seeded user '{settings.SEED_USER_LOGIN}'")

async def seed_courses(session: AsyncSession):
    result = await session.execute(select(Course.name))
    existing = set(result.scalars().all())
    for data in courses_data:
        if data["name"] in existing:
            continue
        session.add(Course(name=data["name"], category=data["category"]))
        logger.info(f"Seeded course '{data['name']}'")

async def seed_all():
    """
    Run all seed functions. Safe to run more than once.
    """
    await connect_to_db()
    async with async_session() as session:
        async with session.begin():
            await seed_user(session)
            await seed_courses(session)
    await close_db_connection()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed_all())
