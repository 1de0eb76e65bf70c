# academy/utils/pagination.py
"""Page/size query parameters and the list envelope shared by every listing endpoint."""
from typing import Any, Callable, Dict, List
from pydantic import BaseModel, Field
from fastapi import Query
from math import ceil


class PaginationParams(BaseModel):
    page: int = Field(1, ge=1)
    size: int = Field(20, ge=1, le=100)


class PaginationMeta(BaseModel):
    page: int
    size: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool


class Paginator:
    """Builds ``{"items": [...], "meta": {...}}`` envelopes.

    The meta fields are repeated at the top level so simple clients can read
    ``total`` without digging into ``meta``.
    """

    @staticmethod
    def get_pagination_params(
        page: int = Query(1, ge=1, description="Page number, starting from 1"),
        size: int = Query(20, ge=1, le=100, description="Records per page")
    ) -> PaginationParams:
        return PaginationParams(page=page, size=size)

    @staticmethod
    def create_meta(page: int, size: int, total: int) -> PaginationMeta:
        total_pages = ceil(total / size) if size else 0
        return PaginationMeta(
            page=page,
            size=size,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_previous=page > 1
        )

    @staticmethod
    def create_response(items: List[Any], page: int, size: int, total: int) -> Dict[str, Any]:
        meta = Paginator.create_meta(page, size, total).model_dump()
        return {"items": items, "meta": meta, **meta}

    @staticmethod
    def from_result(result: Dict[str, Any], formatter: Callable[[Any], Dict[str, Any]]) -> Dict[str, Any]:
        """Format the rows of a ``BaseService.get_paginated`` result."""
        return Paginator.create_response(
            [formatter(item) for item in result["items"]],
            result["page"],
            result["size"],
            result["total"],
        )
