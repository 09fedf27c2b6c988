"""Repository layer for shared course snapshots."""
from __future__ import annotations
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.models.persisted_course import SharedCourseRecord


class SharedCourseNotFoundError(Exception):
    pass


class SharedCourseConflictError(Exception):
    pass


class SharedCourseRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        share_id: str,
        owner_id: str,
        course_slug: str,
        course_name: str,
        data: dict,
    ) -> SharedCourseRecord:
        record = SharedCourseRecord(
            share_id=share_id,
            user_id=owner_id,
            course_slug=course_slug,
            course_name=course_name,
            json_data=data,
        )
        self.session.add(record)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise SharedCourseConflictError("shareId already exists") from exc
        await self.session.refresh(record)
        return record

    async def get(self, share_id: str) -> SharedCourseRecord:
        result = await self.session.execute(
            select(SharedCourseRecord).where(
                SharedCourseRecord.share_id == share_id
            )
        )
        record = result.scalar_one_or_none()
        if not record:
            raise SharedCourseNotFoundError
        return record
