from datetime import datetime, timezone
from typing import List
import enum

from sqlalchemy import (
    Boolean, Column, ForeignKey, Index, Integer, String, Text, DateTime,
    Enum as SAEnum, UniqueConstraint,
    func, text,
)
from sqlalchemy.orm import declarative_base, relationship, Mapped

Base = declarative_base()

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    login = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, login={self.login})>"

class Course(Base):
    __tablename__ = "course"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    category = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<Course(id={self.id}, name={self.name}, category={self.category})>"

class TopicStatus(enum.Enum):
    OPEN = "OPEN"
    RESOLVED = "RESOLVED"

class Topic(Base):
    __tablename__ = "topic"

    __table_args__ = (
        UniqueConstraint("title", "body", name="uq_topic_title_body"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, server_default=func.now())
    status = Column(SAEnum(TopicStatus), nullable=False, default=TopicStatus.OPEN)
    author = Column(String(100), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    course_id = Column(Integer, ForeignKey("course.id"), nullable=False, index=True)

    # Course is referenced, never owned; always needed for projections.
    course: Mapped[Course] = relationship("Course", lazy="joined", innerjoin=True)

    # Replies are only available when loaded explicitly (deep retrieval).
    replies: Mapped[List["Reply"]] = relationship(
        "Reply",
        back_populates="topic",
        order_by="Reply.id",
        cascade="all, delete-orphan",
        lazy="raise",
    )

    def __repr__(self):
        return f"<Topic(id={self.id}, title={self.title}, status={self.status.value}, active={self.active})>"

class Reply(Base):
    __tablename__ = "reply"

    __table_args__ = (
        UniqueConstraint("message", "author", "topic_id", name="uq_reply_message_author_topic"),
        # At most one solution per topic, enforced by the store itself.
        Index(
            "uq_reply_single_solution",
            "topic_id",
            unique=True,
            sqlite_where=text("is_solution = 1"),
            postgresql_where=text("is_solution = true"),
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, server_default=func.now())
    author = Column(String(100), nullable=False)
    is_solution = Column(Boolean, nullable=False, default=False)
    active = Column(Boolean, nullable=False, default=True)
    topic_id = Column(Integer, ForeignKey("topic.id"), nullable=False, index=True)

    topic: Mapped[Topic] = relationship("Topic", back_populates="replies")

    def __repr__(self):
        return (f"<Reply(id={self.id}, topic_id={self.topic_id}, "
                f"author={self.author}, is_solution={self.is_solution})>")
