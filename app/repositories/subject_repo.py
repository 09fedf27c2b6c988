"""Repository layer for Subject (course listing) persistence.

Subjects are the user-visible list of courses. Deleting a subject also
removes its course document directly, without going through the merge engine.
"""
from __future__ import annotations
from typing import Dict, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from app.models.persisted_course import SubjectDataRecord, SubjectRecord


class SubjectNotFoundError(Exception):
    """Raised when a subject could not be located for the owner."""


class SubjectConflictError(Exception):
    """Raised when creating a subject whose slug the owner already uses."""


class SubjectRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    # CREATE -----------------------------------------------------------------
    async def create(self, owner_id: str, name: str, slug: str) -> SubjectRecord:
        if await self.get(owner_id, slug) is not None:
            raise SubjectConflictError("slug already exists")

        record = SubjectRecord(user_id=owner_id, name=name, slug=slug)
        self.session.add(record)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise SubjectConflictError("slug already exists") from exc
        await self.session.refresh(record)
        return record

    async def ensure(self, owner_id: str, name: str, slug: str) -> SubjectRecord:
        """Create the subject, or rename it if the slug is already taken."""
        record = await self.get(owner_id, slug)
        if record is None:
            return await self.create(owner_id, name, slug)
        return await self.rename(owner_id, slug, name)

    # READ -------------------------------------------------------------------
    async def list(self, owner_id: str) -> Sequence[SubjectRecord]:
        result = await self.session.execute(
            select(SubjectRecord)
            .where(SubjectRecord.user_id == owner_id)
            .order_by(SubjectRecord.created_at.desc(), SubjectRecord.id.desc())
        )
        return result.scalars().all()

    async def get(self, owner_id: str, slug: str) -> Optional[SubjectRecord]:
        result = await self.session.execute(
            select(SubjectRecord).where(
                SubjectRecord.user_id == owner_id,
                SubjectRecord.slug == slug,
            )
        )
        return result.scalar_one_or_none()

    async def shared_by_for(self, owner_id: str) -> Dict[str, Optional[str]]:
        """Map slug -> original sharer for the owner's course documents."""
        result = await self.session.execute(
            select(SubjectDataRecord.slug, SubjectDataRecord.shared_by).where(
                SubjectDataRecord.user_id == owner_id
            )
        )
        return {slug: shared_by for slug, shared_by in result.all()}

    # UPDATE -----------------------------------------------------------------
    async def rename(self, owner_id: str, slug: str, name: str) -> SubjectRecord:
        record = await self.get(owner_id, slug)
        if record is None:
            raise SubjectNotFoundError
        record.name = name
        await self.session.commit()
        await self.session.refresh(record)
        return record

    # DELETE -----------------------------------------------------------------
    async def delete(self, owner_id: str, slug: str) -> None:
        record = await self.get(owner_id, slug)
        if record is None:
            raise SubjectNotFoundError
        await self.session.execute(
            delete(SubjectDataRecord).where(
                SubjectDataRecord.user_id == owner_id,
                SubjectDataRecord.slug == slug,
            )
        )
        await self.session.delete(record)
        await self.session.commit()
