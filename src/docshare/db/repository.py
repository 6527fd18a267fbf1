from __future__ import annotations

from typing import Any, Generic, Iterable, Optional, Sequence, Type, TypeVar, cast

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class Repository(Generic[T]):
    """Generic async repository over one mapped model.

    Lookups by id list (``get_many``) keep the caller's order and skip ids
    with no matching row, which is how back-reference lists are populated.
    """

    def __init__(self, session: AsyncSession, model: Type[T]):
        self.session = session
        self.model = model

    async def get(self, id: Any) -> Optional[T]:
        return await self.session.get(self.model, id)

    async def get_many(self, ids: Iterable[Any]) -> list[T]:
        ids = list(ids)
        if not ids:
            return []
        stmt = select(self.model).where(cast(Any, self.model).id.in_(set(ids)))
        by_id = {obj.id: obj for obj in (await self.session.execute(stmt)).scalars()}  # type: ignore[attr-defined]
        return [by_id[i] for i in ids if i in by_id]

    async def find_one(self, **where: Any) -> Optional[T]:
        stmt = select(self.model).filter_by(**where).limit(1)
        return (await self.session.execute(stmt)).scalars().first()

    async def list(
        self,
        *,
        where: Optional[dict[str, Any]] = None,
        filters: Sequence[Any] = (),
        order_by: Sequence[Any] = (),
        limit: int | None = None,
        offset: int | None = None,
    ) -> Sequence[T]:
        stmt = select(self.model)
        if where:
            stmt = stmt.filter_by(**where)
        for cond in filters:
            stmt = stmt.where(cond)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return (await self.session.execute(stmt)).scalars().all()

    async def count(self, where: Optional[dict[str, Any]] = None) -> int:
        stmt = select(func.count()).select_from(self.model)
        if where:
            stmt = stmt.filter_by(**where)
        return int((await self.session.execute(stmt)).scalar_one())

    async def create(self, **data) -> T:
        obj = self.model(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def update(self, id: Any, **data) -> Optional[T]:
        obj = await self.get(id)
        if obj is None:
            return None
        for k, v in data.items():
            setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def delete(self, id: Any) -> int:
        cond = cast(Any, self.model).id == id
        res = await self.session.execute(delete(self.model).where(cond))
        return int(res.rowcount or 0)

    async def delete_where(self, **where: Any) -> int:
        res = await self.session.execute(delete(self.model).filter_by(**where))
        return int(res.rowcount or 0)
