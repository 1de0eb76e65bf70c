# academy/services/base_service.py
"""Base service with common CRUD operations."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Type, Any, Dict, Optional, TypeVar, Generic
import logging

from ..core.exceptions import ConflictError, DatabaseError, NotFoundError

logger = logging.getLogger(__name__)

# Define generic type
T = TypeVar('T')

class BaseService(Generic[T]):
    resource_name = "Record"

    def __init__(self, model: Type[T], db: AsyncSession):
        self.model = model
        self.db = db

    async def get(self, id: int, include_deleted: bool = False) -> Optional[T]:
        stmt = select(self.model).where(self.model.id == id)
        if not include_deleted:
            stmt = stmt.where(self.model.is_deleted == False)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_404(self, id: int) -> T:
        obj = await self.get(id)
        if not obj:
            raise NotFoundError(self.resource_name, id)
        return obj

    def _apply_filters(self, stmt, include_deleted: bool, filters: Dict[str, Any]):
        if not include_deleted:
            stmt = stmt.where(self.model.is_deleted == False)
        for key, value in filters.items():
            if hasattr(self.model, key) and value is not None:
                stmt = stmt.where(getattr(self.model, key) == value)
        return stmt

    async def get_paginated(
        self,
        page: int = 1,
        size: int = 20,
        include_deleted: bool = False,
        order_by: str = None,
        sort: str = "asc",
        conditions: Optional[list] = None,
        **filters
    ):
        """Get paginated results with optional soft delete filtering.

        ``filters`` are equality matches on model columns (``None`` is ignored);
        ``conditions`` are extra SQLAlchemy clauses such as a name search.
        """
        offset = (page - 1) * size

        stmt = self._apply_filters(select(self.model), include_deleted, filters)
        count_stmt = self._apply_filters(select(func.count()).select_from(self.model), include_deleted, filters)
        for condition in conditions or []:
            stmt = stmt.where(condition)
            count_stmt = count_stmt.where(condition)

        count_result = await self.db.execute(count_stmt)
        total = count_result.scalar()

        # Add ordering if specified
        order_field = getattr(self.model, order_by) if order_by and hasattr(self.model, order_by) else self.model.id
        if sort.lower() == "desc":
            stmt = stmt.order_by(order_field.desc())
        else:
            stmt = stmt.order_by(order_field.asc())

        # Execute main query with pagination
        stmt = stmt.offset(offset).limit(size)
        result = await self.db.execute(stmt)
        items = result.scalars().all()

        return {
            "items": items,
            "total": total,
            "page": page,
            "size": size,
            "total_pages": (total + size - 1) // size,
            "has_next": page * size < total,
            "has_previous": page > 1,
        }

    async def create(self, obj_in: Dict) -> T:
        obj = self.model(**obj_in)
        self.db.add(obj)
        await self._commit()
        await self.db.refresh(obj)
        return obj

    async def update(self, id: int, obj_in: Dict) -> Optional[T]:
        obj = await self.get(id)
        if not obj:
            return None
        for key, value in obj_in.items():
            setattr(obj, key, value)
        await self._commit()
        await self.db.refresh(obj)
        return obj

    async def soft_delete(self, id: int) -> bool:
        obj = await self.get(id)
        if not obj:
            return False
        obj.is_deleted = True
        await self.db.commit()
        return True

    async def get_active_count(self, **filters) -> int:
        """Get count of non-deleted records"""
        stmt = self._apply_filters(select(func.count()).select_from(self.model), False, filters)
        result = await self.db.execute(stmt)
        return result.scalar()

    async def _commit(self):
        """Commit, turning unique-constraint violations into 409s."""
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"{self.resource_name} integrity error: {e.orig}")
            raise ConflictError(f"{self.resource_name} conflicts with an existing record")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"{self.resource_name} commit failed: {e}")
            raise DatabaseError(f"Could not save {self.resource_name.lower()}")
