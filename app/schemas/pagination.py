"""Pagination schema shared by list responses."""

from pydantic import BaseModel, ConfigDict


class PaginationResponse(BaseModel):
    """Pagination block of a list response."""

    model_config = ConfigDict(from_attributes=True)

    page: int
    page_size: int
    total: int
    total_pages: int
