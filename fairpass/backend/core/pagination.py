"""
Pagination Utilities.

Offset pagination for the admin list endpoints (events, registrations).
Page sizes come from the `pagination` block of application.yaml: a missing
limit takes the default and an oversized one is capped at the maximum.

Usage:
    @router.get("")
    async def list_events(pagination: Pagination, request_id: RequestId):
        items, total = await service.list_events(pagination.limit, pagination.offset)
        return create_paginated_response(items, EventListItem, total, pagination, request_id)
"""

from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import Depends, Query
from pydantic import BaseModel

from fairpass.backend.core.config import get_app_config
from fairpass.backend.schemas.base import PaginatedResponse, PaginationInfo, ResponseMetadata


@dataclass(frozen=True)
class PaginationParams:
    limit: int
    offset: int


def get_pagination_params(
    limit: int | None = Query(default=None, ge=1, description="Page size"),
    offset: int = Query(default=0, ge=0, description="Number of items to skip"),
) -> PaginationParams:
    config = get_app_config().application.pagination
    if limit is None:
        limit = config.default_limit
    return PaginationParams(limit=min(limit, config.max_limit), offset=offset)


Pagination = Annotated[PaginationParams, Depends(get_pagination_params)]


def create_paginated_response(
    items: list[Any],
    item_schema: type[BaseModel],
    total: int,
    pagination: PaginationParams,
    request_id: str | None = None,
) -> dict[str, Any]:
    """
    Build the paginated envelope for a page of ORM rows or dicts.

    has_more is true while rows remain past this page.
    """
    response = PaginatedResponse(
        data=[item_schema.model_validate(item).model_dump(mode="json") for item in items],
        pagination=PaginationInfo(
            total=total,
            limit=pagination.limit,
            offset=pagination.offset,
            has_more=pagination.offset + len(items) < total,
        ),
        metadata=ResponseMetadata(request_id=request_id),
    )
    return response.model_dump(mode="json")
