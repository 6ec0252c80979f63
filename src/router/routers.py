# src/router/routers.py

from fastapi import FastAPI
from src.auth.auth_controller import router as auth_router
from src.modules.courses.course_controller import router as course_router
from src.modules.replies.reply_controller import router as reply_router
from src.modules.topics.topic_controller import router as topic_router

def include_routers(app: FastAPI) -> None:
    app.include_router(auth_router)
    app.include_router(course_router)
    app.include_router(topic_router)
    app.include_router(reply_router)
