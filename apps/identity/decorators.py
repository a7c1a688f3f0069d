"""
Session guards for Django Ninja endpoints.

Page loads and form actions react differently to a missing session:

    @router.get("")
    @page_login_required
    def page(request): ...           # -> 303 to LANDING_URL

    @router.post("/add", response=ACTION_RESPONSES)
    @action_login_required
    def add(request, ...): ...       # -> 401 {"error": ...}

On success the resolved user is bound to `request.user`.
"""
from functools import wraps
from typing import Callable
from django.http import HttpRequest

from apps.core.http import redirect_to_landing
from apps.core.results import Failure, UNAUTHORIZED
from .api import get_current_user

NOT_AUTHENTICATED = Failure(UNAUTHORIZED, "Authentication required")


def page_login_required(view_func: Callable):
    @wraps(view_func)
    def wrapper(request: HttpRequest, *args, **kwargs):
        user = get_current_user(request)
        if user is None:
            return redirect_to_landing()

        request.user = user
        return view_func(request, *args, **kwargs)
    return wrapper


def action_login_required(view_func: Callable):
    @wraps(view_func)
    def wrapper(request: HttpRequest, *args, **kwargs):
        user = get_current_user(request)
        if user is None:
            return NOT_AUTHENTICATED.to_response()

        request.user = user
        return view_func(request, *args, **kwargs)
    return wrapper
