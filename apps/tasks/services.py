"""
Task and category services.

Every operation is scoped to one user (and, for tasks, optionally one
category). Expected failures come back as `Failure` values; database
errors are logged here and mapped to a 500 `Failure`, never retried.

Duplicate detection is a check-then-insert over two round trips. Two
concurrent adds of the same name can both pass the check.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union
from uuid import UUID

from django.db import DatabaseError, transaction

from apps.core.results import Failure, ListResult, BAD_REQUEST, NOT_FOUND, SERVER_ERROR
from .models import Category, Task
from .ownership import resolve_category, resolve_task

logger = logging.getLogger(__name__)


TASK_NAME_MAX_LENGTH = Task._meta.get_field('task_name').max_length
CATEGORY_NAME_MAX_LENGTH = Category._meta.get_field('name').max_length

MISSING_CONTENT = Failure(BAD_REQUEST, "Missing task content")
CONTENT_TOO_LONG = Failure(BAD_REQUEST, f"Task content exceeds {TASK_NAME_MAX_LENGTH} characters")
MISSING_TASK_ID = Failure(BAD_REQUEST, "Missing task ID")
DUPLICATE_TASK = Failure(BAD_REQUEST, "Task already exists")
TASK_NOT_FOUND = Failure(NOT_FOUND, "Task not found or unauthorized")

MISSING_CATEGORY_NAME = Failure(BAD_REQUEST, "Missing category name")
CATEGORY_NAME_TOO_LONG = Failure(BAD_REQUEST, f"Category name exceeds {CATEGORY_NAME_MAX_LENGTH} characters")
MISSING_CATEGORY_ID = Failure(BAD_REQUEST, "Missing category ID")
DUPLICATE_CATEGORY = Failure(BAD_REQUEST, "Category already exists")
CATEGORY_NOT_FOUND = Failure(NOT_FOUND, "Category not found or unauthorized")


@dataclass(frozen=True)
class TaskScope:
    """The equality filters applied to every task query."""
    user_id: UUID
    category_id: Optional[UUID] = None

    def filters(self) -> dict:
        scope = {'user_id': self.user_id}
        if self.category_id is not None:
            scope['category_id'] = self.category_id
        return scope


def is_duplicate_name(candidate: str, existing: Iterable[str]) -> bool:
    """Case-insensitive match of `candidate` against existing names."""
    folded = candidate.lower()
    return any(name.lower() == folded for name in existing)


# =============================================================================
# Tasks
# =============================================================================

def list_tasks(scope: TaskScope) -> ListResult[Task]:
    """
    All tasks in scope, oldest first.

    A backend failure yields an empty list with an error message instead
    of aborting the page.
    """
    try:
        tasks = list(Task.objects.filter(**scope.filters()))
    except DatabaseError as e:
        logger.error(f"Error fetching tasks for user {scope.user_id}: {e}")
        return ListResult(error="Failed to load tasks")
    return ListResult(items=tasks)


def add_task(scope: TaskScope, content: Optional[str]) -> Union[Task, Failure]:
    content = (content or "").strip()
    if not content:
        return MISSING_CONTENT
    # SQLite doesn't enforce varchar length; check here so every backend agrees
    if len(content) > TASK_NAME_MAX_LENGTH:
        return CONTENT_TOO_LONG

    try:
        existing = list(
            Task.objects.filter(**scope.filters()).values_list('task_name', flat=True)
        )
    except DatabaseError as e:
        logger.error(f"Error checking duplicate tasks for user {scope.user_id}: {e}")
        return Failure(SERVER_ERROR, "Failed to check for duplicates")

    if is_duplicate_name(content, existing):
        return DUPLICATE_TASK

    try:
        task = Task.objects.create(
            user_id=scope.user_id,
            category_id=scope.category_id,
            task_name=content,
            completed=False,
        )
    except DatabaseError as e:
        logger.error(f"Error adding task for user {scope.user_id}: {e}")
        return Failure(SERVER_ERROR, "Failed to add task")

    logger.info(f"Task {task.id} added for user {scope.user_id}")
    return task


def toggle_task(scope: TaskScope, task_id: Optional[str]) -> Union[Task, Failure]:
    """
    Flip `completed` on one owned task.

    The row is locked between read and write so concurrent toggles
    serialize instead of losing an update.
    """
    if not task_id:
        return MISSING_TASK_ID

    try:
        with transaction.atomic():
            task = resolve_task(task_id, scope.user_id, scope.category_id, for_update=True)
            if task is None:
                return TASK_NOT_FOUND

            task.completed = not task.completed
            task.save(update_fields=['completed'])
    except DatabaseError as e:
        logger.error(f"Error toggling task {task_id}: {e}")
        return Failure(SERVER_ERROR, "Failed to toggle task")

    return task


def delete_task(scope: TaskScope, task_id: Optional[str]) -> Union[UUID, Failure]:
    """Remove one owned task. Returns its id."""
    if not task_id:
        return MISSING_TASK_ID

    try:
        with transaction.atomic():
            task = resolve_task(task_id, scope.user_id, scope.category_id, for_update=True)
            if task is None:
                return TASK_NOT_FOUND

            deleted_id = task.id
            task.delete()
    except DatabaseError as e:
        logger.error(f"Error deleting task {task_id}: {e}")
        return Failure(SERVER_ERROR, "Failed to delete task")

    logger.info(f"Task {deleted_id} deleted for user {scope.user_id}")
    return deleted_id


# =============================================================================
# Categories
# =============================================================================

def list_categories(user_id: UUID) -> ListResult[Category]:
    try:
        categories = list(Category.objects.filter(user_id=user_id))
    except DatabaseError as e:
        logger.error(f"Error fetching categories for user {user_id}: {e}")
        return ListResult(error="Failed to load categories")
    return ListResult(items=categories)


def add_category(user_id: UUID, name: Optional[str]) -> Union[Category, Failure]:
    name = (name or "").strip()
    if not name:
        return MISSING_CATEGORY_NAME
    if len(name) > CATEGORY_NAME_MAX_LENGTH:
        return CATEGORY_NAME_TOO_LONG

    try:
        existing: List[str] = list(
            Category.objects.filter(user_id=user_id).values_list('name', flat=True)
        )
    except DatabaseError as e:
        logger.error(f"Error checking duplicate categories for user {user_id}: {e}")
        return Failure(SERVER_ERROR, "Failed to check for duplicates")

    if is_duplicate_name(name, existing):
        return DUPLICATE_CATEGORY

    try:
        category = Category.objects.create(user_id=user_id, name=name)
    except DatabaseError as e:
        logger.error(f"Error adding category for user {user_id}: {e}")
        return Failure(SERVER_ERROR, "Failed to add category")

    logger.info(f"Category {category.id} added for user {user_id}")
    return category


def delete_category(user_id: UUID, category_id: Optional[str]) -> Union[UUID, Failure]:
    """Remove an owned category together with the tasks filed under it."""
    if not category_id:
        return MISSING_CATEGORY_ID

    category = resolve_category(category_id, user_id)
    if category is None:
        return CATEGORY_NOT_FOUND

    deleted_id = category.id
    try:
        category.delete()
    except DatabaseError as e:
        logger.error(f"Error deleting category {deleted_id}: {e}")
        return Failure(SERVER_ERROR, "Failed to delete category")

    logger.info(f"Category {deleted_id} deleted for user {user_id}")
    return deleted_id


def category_scope(user_id: UUID, category_id) -> Optional[TaskScope]:
    """Scope for an owned category, or None when the caller doesn't own it."""
    category = resolve_category(category_id, user_id)
    if category is None:
        return None
    return TaskScope(user_id=user_id, category_id=category.id)
