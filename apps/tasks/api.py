"""
Task and category API endpoints.

Two scopes share the same guard, resolver and service calls:
- /tasks/...                        every task the user owns
- /categories/{category_id}/...     tasks filed under one owned category

Page loads (GET) redirect to LANDING_URL when there is no session or the
category isn't owned. Actions (POST, form-encoded) answer with
`{"success": true}` or a tagged `{"error": ...}` failure.
"""
from typing import Callable
from ninja import Form, Router
from django.http import HttpRequest

from apps.core.http import redirect_to_landing
from apps.core.results import Failure, success_body
from apps.identity.decorators import action_login_required, page_login_required
from . import services
from .dtos import (
    ACTION_RESPONSES,
    CategoryListOut,
    CategoryIdIn,
    CategoryNameIn,
    CategoryPageOut,
    TaskContentIn,
    TaskIdIn,
    TaskPageOut,
)
from .ownership import resolve_category
from .services import TaskScope

home_router = Router(tags=["Tasks"])
category_router = Router(tags=["Categories"])


# =============================================================================
# Helper Functions
# =============================================================================

def respond(result):
    """Map a service result onto (status, body)."""
    if isinstance(result, Failure):
        return result.to_response()
    return 200, success_body()


def home_scope(request: HttpRequest) -> TaskScope:
    return TaskScope(user_id=request.user.id)


def in_category(request: HttpRequest, category_id: str, operation: Callable, value):
    """
    Run a task operation inside an owned category's scope.

    An unowned or unknown category is reported exactly like a missing one.
    """
    scope = services.category_scope(request.user.id, category_id)
    if scope is None:
        return services.CATEGORY_NOT_FOUND.to_response()
    return respond(operation(scope, value))


# =============================================================================
# Home scope
# =============================================================================

@home_router.get("", response=TaskPageOut, auth=None)
@page_login_required
def home_page(request: HttpRequest):
    """
    All of the user's tasks.
    """
    listing = services.list_tasks(home_scope(request))
    return {"tasks": listing.items, "error": listing.error}


@home_router.post("/add", response=ACTION_RESPONSES, auth=None)
@action_login_required
def home_add_task(request: HttpRequest, payload: Form[TaskContentIn]):
    return respond(services.add_task(home_scope(request), payload.content))


@home_router.post("/toggle", response=ACTION_RESPONSES, auth=None)
@action_login_required
def home_toggle_task(request: HttpRequest, payload: Form[TaskIdIn]):
    return respond(services.toggle_task(home_scope(request), payload.id))


@home_router.post("/delete", response=ACTION_RESPONSES, auth=None)
@action_login_required
def home_delete_task(request: HttpRequest, payload: Form[TaskIdIn]):
    return respond(services.delete_task(home_scope(request), payload.id))


# =============================================================================
# Categories
# =============================================================================

@category_router.get("", response=CategoryListOut, auth=None)
@page_login_required
def categories_page(request: HttpRequest):
    listing = services.list_categories(request.user.id)
    return {"categories": listing.items, "error": listing.error}


@category_router.post("/add", response=ACTION_RESPONSES, auth=None)
@action_login_required
def add_category(request: HttpRequest, payload: Form[CategoryNameIn]):
    return respond(services.add_category(request.user.id, payload.name))


@category_router.post("/delete", response=ACTION_RESPONSES, auth=None)
@action_login_required
def delete_category(request: HttpRequest, payload: Form[CategoryIdIn]):
    """
    Delete an owned category and every task filed under it.
    """
    return respond(services.delete_category(request.user.id, payload.id))


# =============================================================================
# Category scope
# =============================================================================

@category_router.get("/{category_id}", response=CategoryPageOut, auth=None)
@page_login_required
def category_page(request: HttpRequest, category_id: str):
    """
    One owned category and its tasks.
    """
    category = resolve_category(category_id, request.user.id)
    if category is None:
        return redirect_to_landing()

    listing = services.list_tasks(TaskScope(user_id=request.user.id, category_id=category.id))
    return {"category": category, "tasks": listing.items, "error": listing.error}


@category_router.post("/{category_id}/add", response=ACTION_RESPONSES, auth=None)
@action_login_required
def category_add_task(request: HttpRequest, category_id: str, payload: Form[TaskContentIn]):
    return in_category(request, category_id, services.add_task, payload.content)


@category_router.post("/{category_id}/toggle", response=ACTION_RESPONSES, auth=None)
@action_login_required
def category_toggle_task(request: HttpRequest, category_id: str, payload: Form[TaskIdIn]):
    return in_category(request, category_id, services.toggle_task, payload.id)


@category_router.post("/{category_id}/delete", response=ACTION_RESPONSES, auth=None)
@action_login_required
def category_delete_task(request: HttpRequest, category_id: str, payload: Form[TaskIdIn]):
    return in_category(request, category_id, services.delete_task, payload.id)
