from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from formintake.schemas.submission import SubmissionKind
from formintake.services.kinds import get_kind_spec


class SubmissionStore:
    """Insert-only access to the submission tables."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def insert(self, kind: SubmissionKind, row: dict[str, Any]) -> str:
        model = get_kind_spec(kind).model
        record = model(**row)
        self.session.add(record)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return record.id

    async def select_all(self, kind: SubmissionKind) -> list[Any]:
        model = get_kind_spec(kind).model
        result = await self.session.execute(select(model).order_by(model.created_at.desc(), model.id.desc()))
        return list(result.scalars().all())

    async def count(self, kind: SubmissionKind) -> int:
        model = get_kind_spec(kind).model
        return int((await self.session.execute(select(func.count()).select_from(model))).scalar_one())
