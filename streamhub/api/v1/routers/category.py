from fastapi import APIRouter, Depends, Query

from streamhub.api.v1.dependency import AdminUser
from streamhub.api.v1.schemas.base import ApiOut
from streamhub.api.v1.schemas.category import (
    CreateCategoryIn,
    DeleteCategoryIn,
    DeleteCategoryOut,
    UpdateCategoryIn,
)
from streamhub.domain.live.category.category_domain import CategoryService
from streamhub.domain.live.category.category_models import (
    CategoryCreateParams,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdateParams,
)
from streamhub.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

router = APIRouter(prefix="/category")

# Singleton instance
_category_service = CategoryService()


def get_category_service() -> CategoryService:
    """Get the singleton CategoryService instance."""
    return _category_service


@router.get("/list_categories")
async def list_categories(
    parent_id: str | None = Query(None, description="Only children of this category"),
    service: CategoryService = Depends(get_category_service),
) -> ApiOut[CategoryListResponse]:
    result = await service.list_categories(parent_id=parent_id)
    return ApiOut[CategoryListResponse](results=result)


@router.get("/get_category")
async def get_category(
    slug: str | None = Query(None, description="Category slug"),
    category_id: str | None = Query(None, description="Category identifier"),
    service: CategoryService = Depends(get_category_service),
) -> ApiOut[CategoryResponse]:
    """Get a category by slug or id."""
    if category_id:
        result = await service.get_category_by_id(category_id)
    elif slug:
        result = await service.get_category_by_slug(slug)
    else:
        raise AppError(
            errcode=AppErrorCode.E_INVALID_REQUEST,
            errmesg="Provide slug or category_id",
            status_code=HttpStatusCode.BAD_REQUEST,
        )
    return ApiOut[CategoryResponse](results=result)


@router.post("/create_category")
async def create_category(
    payload: CreateCategoryIn,
    user: AdminUser,
    service: CategoryService = Depends(get_category_service),
) -> ApiOut[CategoryResponse]:
    result = await service.create_category(
        CategoryCreateParams(name=payload.name, parent_id=payload.parent_id)
    )
    return ApiOut[CategoryResponse](results=result)


@router.post("/update_category")
async def update_category(
    payload: UpdateCategoryIn,
    user: AdminUser,
    service: CategoryService = Depends(get_category_service),
) -> ApiOut[CategoryResponse]:
    """Rename and/or re-parent a category. Only fields present in the body change."""
    # Only include fields that were explicitly provided in the request
    update_data = payload.model_dump(exclude_unset=True, include={"name", "parent_id"})
    result = await service.update_category(
        payload.category_id,
        CategoryUpdateParams(**update_data),
    )
    return ApiOut[CategoryResponse](results=result)


@router.post("/delete_category")
async def delete_category(
    payload: DeleteCategoryIn,
    user: AdminUser,
    service: CategoryService = Depends(get_category_service),
) -> ApiOut[DeleteCategoryOut]:
    deleted = await service.delete_category(payload.category_id)
    return ApiOut[DeleteCategoryOut](results=DeleteCategoryOut(deleted=deleted))
