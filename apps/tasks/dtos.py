from typing import List, Optional
from uuid import UUID
from ninja import Schema


# =============================================================================
# Output
# =============================================================================

class TaskOut(Schema):
    task_id: UUID
    task_name: str
    completed: bool
    user_id: UUID
    category_id: Optional[UUID] = None


class CategoryOut(Schema):
    category_id: UUID
    user_id: UUID
    name: str


class TaskPageOut(Schema):
    """Home page load. `error` is set when tasks could not be loaded."""
    tasks: List[TaskOut]
    error: Optional[str] = None


class CategoryPageOut(Schema):
    category: CategoryOut
    tasks: List[TaskOut]
    error: Optional[str] = None


class CategoryListOut(Schema):
    categories: List[CategoryOut]
    error: Optional[str] = None


class SuccessOut(Schema):
    success: bool = True


class ErrorOut(Schema):
    error: str


ACTION_RESPONSES = {
    200: SuccessOut,
    400: ErrorOut,
    401: ErrorOut,
    404: ErrorOut,
    500: ErrorOut,
}


# =============================================================================
# Form input
# =============================================================================
# Fields default to "" so a missing value reaches the service and comes
# back as a tagged 400 rather than a schema validation error.

class TaskContentIn(Schema):
    content: str = ""


class TaskIdIn(Schema):
    id: str = ""


class CategoryIdIn(Schema):
    id: str = ""


class CategoryNameIn(Schema):
    name: str = ""
