"""
Ownership resolution for categories and tasks.

A row is returned only if it exists AND belongs to the caller. Missing,
foreign-owned and malformed identifiers all resolve to None so callers
cannot tell them apart, and neither can the client they answer.
"""
import logging
from typing import Optional, Union
from uuid import UUID

from django.db import DatabaseError, transaction

from .models import Category, Task

logger = logging.getLogger(__name__)


def parse_id(value: Union[str, UUID, None]) -> Optional[UUID]:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except (TypeError, ValueError):
        return None


def resolve_category(category_id, user_id: UUID) -> Optional[Category]:
    """Fetch the user's category, or None."""
    pk = parse_id(category_id)
    if pk is None:
        return None

    try:
        with transaction.atomic():
            return Category.objects.get(id=pk, user_id=user_id)
    except Category.DoesNotExist:
        logger.warning(f"Category {pk} not found for user {user_id}")
        return None
    except DatabaseError as e:
        logger.error(f"Error resolving category {pk}: {e}")
        return None


def resolve_task(
    task_id,
    user_id: UUID,
    category_id: Optional[UUID] = None,
    for_update: bool = False,
) -> Optional[Task]:
    """
    Fetch the user's task, or None.

    With `category_id` the task must also be filed under that category.
    `for_update` locks the row until the caller's transaction ends.
    """
    pk = parse_id(task_id)
    if pk is None:
        return None

    queryset = Task.objects.filter(id=pk, user_id=user_id)
    if category_id is not None:
        queryset = queryset.filter(category_id=category_id)
    if for_update:
        queryset = queryset.select_for_update()

    try:
        with transaction.atomic():
            return queryset.get()
    except Task.DoesNotExist:
        logger.warning(f"Task {pk} not found for user {user_id}")
        return None
    except DatabaseError as e:
        logger.error(f"Error resolving task {pk}: {e}")
        return None
