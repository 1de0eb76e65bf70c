from sqlalchemy.orm import as_declarative, declared_attr
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import DateTime, Boolean, Integer, func
from datetime import datetime


@as_declarative()
class Base:
    __abstract__ = True  # Prevents creating a table for the base class

    id: Mapped[int]

    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower()

    id = mapped_column(Integer, primary_key=True, index=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Soft delete flag - indexed for list queries
    is_deleted = mapped_column(Boolean, default=False, nullable=False, index=True)
