"""Category domain models."""

from datetime import datetime

from pydantic import BaseModel


class CategoryCreateParams(BaseModel):
    name: str | None = None
    parent_id: str | None = None


class CategoryUpdateParams(BaseModel):
    """Only the fields explicitly set are applied; ``parent_id=None`` moves to top level."""

    name: str | None = None
    parent_id: str | None = None


class CategoryResponse(BaseModel):
    category_id: str
    name: str
    slug: str
    tag_name: str
    parent_id: str | None = None
    created_at: datetime
    updated_at: datetime


class CategoryListResponse(BaseModel):
    categories: list[CategoryResponse]
