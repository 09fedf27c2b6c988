"""SQLAlchemy ORM models for persisted subjects and their course documents.

Pydantic models in course.py describe request/response payloads; this layer
manages persistence concerns only. A course document is stored as one JSON
value per (owner, slug) pair.
"""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column, declarative_base
from sqlalchemy import String, DateTime, JSON, UniqueConstraint

Base = declarative_base()


class SubjectRecord(Base):
    __tablename__ = "subjects"
    __table_args__ = (
        UniqueConstraint("user_id", "slug", name="uq_subjects_user_slug"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    slug: Mapped[str] = mapped_column(String(64))
    name: Mapped[str] = mapped_column(String(200))
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def to_dict(self, shared_by: Optional[str] = None) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "sharedByUsername": shared_by,
        }


class SubjectDataRecord(Base):
    """The persisted course document for one (owner, slug) pair."""

    __tablename__ = "subject_data"
    __table_args__ = (
        UniqueConstraint("user_id", "slug", name="uq_subject_data_user_slug"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    slug: Mapped[str] = mapped_column(String(64))
    json_data: Mapped[dict] = mapped_column(JSON, nullable=False)
    shared_by: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class SharedCourseRecord(Base):
    """Read-only snapshot of a course published under a share id."""

    __tablename__ = "shared_courses"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    share_id: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    course_slug: Mapped[str] = mapped_column(String(64))
    course_name: Mapped[str] = mapped_column(String(200))
    json_data: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )

    def to_dict(self) -> dict:
        return {
            "shareId": self.share_id,
            "courseName": self.course_name,
            "courseData": self.json_data,
            "sharedBy": self.user_id,
            "createdAt": self.created_at.isoformat(),
        }
