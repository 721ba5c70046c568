from pydantic import BaseModel, Field


class CreateCategoryIn(BaseModel):
    name: str | None = Field(default=None, description="Display name; the slug derives from it")
    parent_id: str | None = Field(default=None, description="Parent category, if any")


class UpdateCategoryIn(BaseModel):
    category_id: str
    name: str | None = None
    parent_id: str | None = Field(
        default=None, description="Set to null to make the category top-level"
    )


class DeleteCategoryIn(BaseModel):
    category_id: str


class DeleteCategoryOut(BaseModel):
    deleted: bool
