"""Shared API schemas."""

from pydantic import BaseModel


class PaginationMeta(BaseModel):
    """Page information returned with list responses."""

    page: int
    limit: int
    total: int
    pages: int
