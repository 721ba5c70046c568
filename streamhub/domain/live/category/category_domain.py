"""Category domain service."""

from ._categories import CategoryOperations
from .category_models import (
    CategoryCreateParams,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdateParams,
)


class CategoryService:
    """Category hierarchy."""

    def __init__(self):
        self._categories = CategoryOperations()

    async def create_category(self, params: CategoryCreateParams) -> CategoryResponse:
        return await self._categories.create_category(params=params)

    async def update_category(
        self,
        category_id: str,
        params: CategoryUpdateParams,
    ) -> CategoryResponse:
        """Rename and/or re-parent a category.

        Raises AppError for blank names, unknown ids and cycles.
        """
        return await self._categories.update_category(category_id=category_id, params=params)

    async def delete_category(self, category_id: str) -> bool:
        return await self._categories.delete_category(category_id=category_id)

    async def get_category_by_id(self, category_id: str) -> CategoryResponse:
        return await self._categories.get_category_by_id(category_id=category_id)

    async def get_category_by_slug(self, slug: str) -> CategoryResponse:
        return await self._categories.get_category_by_slug(slug=slug)

    async def list_categories(self, parent_id: str | None = None) -> CategoryListResponse:
        return await self._categories.list_categories(parent_id=parent_id)
