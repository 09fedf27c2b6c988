"""Repository layer for course document persistence.

One JSON document per (owner, slug). The repository never combines
documents itself; callers pass the output of the merge engine to ``upsert``.
Storage errors propagate unchanged to the caller.
"""
from __future__ import annotations
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from app.models.persisted_course import SubjectDataRecord


class SubjectDataRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    # READ -------------------------------------------------------------------
    async def get(self, owner_id: str, slug: str) -> Optional[SubjectDataRecord]:
        result = await self.session.execute(
            select(SubjectDataRecord).where(
                SubjectDataRecord.user_id == owner_id,
                SubjectDataRecord.slug == slug,
            )
        )
        return result.scalar_one_or_none()

    # UPSERT -----------------------------------------------------------------
    async def upsert(
        self,
        owner_id: str,
        slug: str,
        data: dict,
        shared_by: Optional[str] = None,
    ) -> SubjectDataRecord:
        record = await self.get(owner_id, slug)
        if record is None:
            record = SubjectDataRecord(
                user_id=owner_id,
                slug=slug,
                json_data=data,
                shared_by=shared_by,
            )
            self.session.add(record)
            try:
                await self.session.commit()
            except IntegrityError:
                # A concurrent first write created the row; update it instead
                await self.session.rollback()
                record = await self.get(owner_id, slug)
                if record is None:
                    raise
                return await self._update(record, data, shared_by)
            await self.session.refresh(record)
            return record
        return await self._update(record, data, shared_by)

    async def _update(
        self,
        record: SubjectDataRecord,
        data: dict,
        shared_by: Optional[str],
    ) -> SubjectDataRecord:
        record.json_data = data
        if shared_by is not None:
            record.shared_by = shared_by
        await self.session.commit()
        await self.session.refresh(record)
        return record

    # DELETE -----------------------------------------------------------------
    async def delete(self, owner_id: str, slug: str) -> bool:
        result = await self.session.execute(
            delete(SubjectDataRecord).where(
                SubjectDataRecord.user_id == owner_id,
                SubjectDataRecord.slug == slug,
            )
        )
        await self.session.commit()
        return result.rowcount > 0
