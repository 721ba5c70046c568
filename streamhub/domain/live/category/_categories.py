"""Category hierarchy operations."""

from beanie.operators import Set
from loguru import logger
from pymongo import ASCENDING

from streamhub.schemas import Category
from streamhub.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from streamhub.utils.clock import utc_now
from streamhub.utils.idgen import new_category_id

from .._base import BaseService
from .category_models import (
    CategoryCreateParams,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdateParams,
)
from .slug import make_tag_name, slugify


def category_to_response(category: Category) -> CategoryResponse:
    return CategoryResponse(**category.model_dump(exclude={"id"}, mode="json"))


class CategoryOperations(BaseService):
    """Categories form a forest: ``parent_id`` references, no cycles."""

    async def create_category(self, params: CategoryCreateParams) -> CategoryResponse:
        """
        Create a category. The slug is derived from the name.

        Raises:
            AppError: E_INVALID_CATEGORY for a blank name,
                E_CATEGORY_NOT_FOUND for an unknown parent.
        """
        name, slug = self._validate_name(params.name)
        parent = await self._get_category(params.parent_id) if params.parent_id else None

        now = utc_now()
        category = Category(
            category_id=new_category_id(),
            name=name,
            slug=slug,
            tag_name=make_tag_name(name, parent.name if parent else None),
            parent_id=parent.category_id if parent else None,
            created_at=now,
            updated_at=now,
        )
        await category.insert()

        logger.info(f"Created category {category.category_id} ({slug})")
        return category_to_response(category)

    async def update_category(
        self,
        category_id: str,
        params: CategoryUpdateParams,
    ) -> CategoryResponse:
        """
        Rename and/or re-parent a category.

        Raises:
            AppError: E_INVALID_CATEGORY for a blank name or a parent that would
                create a cycle, E_CATEGORY_NOT_FOUND for unknown ids.
        """
        category = await self._get_category(category_id)
        fields = params.model_fields_set

        name, slug = category.name, category.slug
        if "name" in fields:
            name, slug = self._validate_name(params.name)

        parent_id = category.parent_id
        if "parent_id" in fields:
            parent_id = params.parent_id
            if parent_id:
                await self._check_no_cycle(category_id, parent_id)

        parent = await self._get_category(parent_id) if parent_id else None
        renamed = name != category.name

        category.name = name
        category.slug = slug
        category.parent_id = parent_id
        category.tag_name = make_tag_name(name, parent.name if parent else None)
        category.updated_at = utc_now()
        await category.save()

        if renamed:
            await self._retag_children(category)

        logger.info(f"Updated category {category_id} ({slug})")
        return category_to_response(category)

    async def delete_category(self, category_id: str) -> bool:
        """Delete a category. Its children become top-level categories."""
        category = await self._get_category(category_id)

        children = await Category.find(Category.parent_id == category_id).to_list()
        now = utc_now()
        for child in children:
            await Category.find(Category.category_id == child.category_id).update(
                Set(
                    {
                        Category.parent_id: None,
                        Category.tag_name: make_tag_name(child.name),
                        Category.updated_at: now,
                    }
                )
            )

        await category.delete()
        logger.info(f"Deleted category {category_id}, {len(children)} child(ren) promoted")
        return True

    async def get_category_by_id(self, category_id: str) -> CategoryResponse:
        return category_to_response(await self._get_category(category_id))

    async def get_category_by_slug(self, slug: str) -> CategoryResponse:
        category = await Category.find_one(Category.slug == slug)
        if not category:
            raise AppError(
                errcode=AppErrorCode.E_CATEGORY_NOT_FOUND,
                errmesg=f"Category not found: {slug}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return category_to_response(category)

    async def list_categories(self, parent_id: str | None = None) -> CategoryListResponse:
        """All categories by name, or the children of ``parent_id``."""
        query = Category.find(Category.parent_id == parent_id) if parent_id else Category.find()
        categories = await query.sort([("name", ASCENDING)]).to_list()
        return CategoryListResponse(categories=[category_to_response(c) for c in categories])

    async def _get_category(self, category_id: str) -> Category:
        category = await Category.find_one(Category.category_id == category_id)
        if not category:
            raise AppError(
                errcode=AppErrorCode.E_CATEGORY_NOT_FOUND,
                errmesg=f"Category not found: {category_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return category

    async def _check_no_cycle(self, category_id: str, parent_id: str) -> None:
        """Walk up from ``parent_id``; reaching ``category_id`` means a cycle."""
        seen: set[str] = set()
        current: str | None = parent_id
        while current:
            if current == category_id:
                raise AppError(
                    errcode=AppErrorCode.E_INVALID_CATEGORY,
                    errmesg="A category can't be its own ancestor",
                    status_code=HttpStatusCode.BAD_REQUEST,
                )
            if current in seen:
                logger.error(f"Category hierarchy already contains a cycle at {current}")
                break
            seen.add(current)
            current = (await self._get_category(current)).parent_id

    async def _retag_children(self, parent: Category) -> None:
        children = await Category.find(Category.parent_id == parent.category_id).to_list()
        for child in children:
            await Category.find(Category.category_id == child.category_id).update(
                Set({Category.tag_name: make_tag_name(child.name, parent.name)})
            )

    @staticmethod
    def _validate_name(name: str | None) -> tuple[str, str]:
        name = (name or "").strip()
        slug = slugify(name)
        if not name or not slug:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_CATEGORY,
                errmesg="Category name can't be blank",
                status_code=HttpStatusCode.BAD_REQUEST,
            )
        return name, slug
