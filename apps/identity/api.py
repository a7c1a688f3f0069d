"""
Identity API endpoints with JWT authentication.

Provides register, login, logout, token refresh and profile endpoints.
Uses JWT tokens in httpOnly cookies; `get_current_user` is the session
lookup every other app's guard is built on.
"""
from typing import Optional
from ninja import Router, Schema
from django.conf import settings
from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.http import HttpRequest, HttpResponse
from ninja.errors import HttpError

from .models import User
from .dtos import UserDTO, RegisterIn, LoginIn
from .services import get_active_user, get_user_dto, register_user, to_user_dto
from .jwt_auth import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    create_access_token,
    create_token_pair,
    get_user_id_from_token,
    get_access_token_cookie_settings,
    get_refresh_token_cookie_settings,
)

router = Router(tags=["Identity"])


# =============================================================================
# Schemas
# =============================================================================

class TokenResponse(Schema):
    success: bool
    user: Optional[UserDTO] = None
    message: Optional[str] = None


# =============================================================================
# Helper Functions
# =============================================================================

def get_current_user(request: HttpRequest) -> Optional[User]:
    """
    Extract and validate user from JWT access token cookie.

    Returns User object if valid token, None otherwise.
    """
    access_token = request.COOKIES.get(ACCESS_COOKIE)
    if not access_token:
        return None

    user_id = get_user_id_from_token(access_token)
    if not user_id:
        return None

    return get_active_user(user_id)


def require_auth(request: HttpRequest) -> User:
    """
    Require authentication. Raises 401 if not authenticated.
    """
    user = get_current_user(request)
    if not user:
        raise HttpError(401, "Authentication required")
    return user


def is_production() -> bool:
    """Secure cookies everywhere except DEBUG development."""
    return not settings.DEBUG


def _session_response(user: User, set_refresh: bool = True) -> HttpResponse:
    """JSON response carrying the user, with fresh session cookies."""
    response = HttpResponse(
        TokenResponse(success=True, user=to_user_dto(user)).model_dump_json(),
        content_type='application/json'
    )

    prod = is_production()
    if set_refresh:
        access_token, refresh_token = create_token_pair(user.id)
        response.set_cookie(REFRESH_COOKIE, refresh_token, **get_refresh_token_cookie_settings(prod))
    else:
        access_token = create_access_token(user.id)
    response.set_cookie(ACCESS_COOKIE, access_token, **get_access_token_cookie_settings(prod))

    return response


# =============================================================================
# Auth Endpoints
# =============================================================================

@router.post("/register", response=TokenResponse, auth=None)
def register(request: HttpRequest, payload: RegisterIn):
    """
    Create an account and sign it in.
    """
    if not payload.username.strip():
        raise HttpError(400, "Username is required")

    try:
        validate_password(payload.password)
    except ValidationError as e:
        raise HttpError(400, " ".join(e.messages))

    user = register_user(payload)
    if user is None:
        raise HttpError(400, "Username already taken")

    return _session_response(user)


@router.post("/login", response=TokenResponse, auth=None)
def login_user(request: HttpRequest, payload: LoginIn):
    """
    Authenticate user and set JWT tokens in httpOnly cookies.

    Returns user data on success, sets access_token and refresh_token cookies.
    """
    user = authenticate(request, username=payload.username, password=payload.password)

    if user is None:
        raise HttpError(401, "Invalid username or password")

    if not user.is_active:
        raise HttpError(401, "Account is disabled")

    return _session_response(user)


@router.post("/logout", response=TokenResponse, auth=None)
def logout_user(request: HttpRequest):
    """
    Clear authentication cookies.
    """
    response = HttpResponse(
        TokenResponse(success=True, message="Logged out").model_dump_json(),
        content_type='application/json'
    )

    response.delete_cookie(ACCESS_COOKIE, path='/')
    response.delete_cookie(REFRESH_COOKIE, path='/')

    return response


@router.post("/refresh", response=TokenResponse, auth=None)
def refresh_token(request: HttpRequest):
    """
    Refresh the access token using the refresh token.
    """
    refresh_token_value = request.COOKIES.get(REFRESH_COOKIE)

    if not refresh_token_value:
        raise HttpError(401, "No refresh token")

    user_id = get_user_id_from_token(refresh_token_value, token_type='refresh')
    user = get_active_user(user_id) if user_id else None
    if user is None:
        raise HttpError(401, "Invalid refresh token")

    return _session_response(user, set_refresh=False)


@router.get("/me", response=UserDTO, auth=None)
def get_me(request: HttpRequest):
    """
    Get current authenticated user's profile.
    """
    user = require_auth(request)
    user_dto = get_user_dto(user.id)
    if not user_dto:
        raise HttpError(404, "User not found")
    return user_dto
