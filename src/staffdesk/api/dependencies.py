"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from staffdesk.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from staffdesk.core.database import get_db


# Type alias for database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]


class PageParams(BaseModel):
    """Normalized pagination parameters.

    Nothing is rejected: non-numeric values fall back to the defaults and
    out-of-range ones are clamped, ``per_page`` to 1..100 and ``page`` to at
    least 1.
    """

    page: int = 1
    per_page: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def _lenient_int(value: str | None, default: int) -> int:
    """Parse a query value, falling back to ``default`` when it is not an integer."""
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def get_page_params(
    page: Annotated[str | None, Query()] = None,
    per_page: Annotated[str | None, Query()] = None,
) -> PageParams:
    return PageParams(
        page=max(_lenient_int(page, 1), 1),
        per_page=min(max(_lenient_int(per_page, DEFAULT_PAGE_SIZE), 1), MAX_PAGE_SIZE),
    )


Pagination = Annotated[PageParams, Depends(get_page_params)]
