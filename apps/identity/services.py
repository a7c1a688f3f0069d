"""Services for Identity app."""
import logging
from typing import Optional
from uuid import UUID

from django.db import IntegrityError, transaction

from .models import User
from .dtos import UserDTO, RegisterIn

logger = logging.getLogger(__name__)


def to_user_dto(user: User) -> UserDTO:
    return UserDTO(
        id=user.id,
        username=user.username,
        email=user.email,
        is_active=user.is_active,
    )


def get_user_dto(user_id: UUID) -> Optional[UserDTO]:
    try:
        return to_user_dto(User.objects.get(id=user_id))
    except User.DoesNotExist:
        return None


def get_active_user(user_id: UUID) -> Optional[User]:
    try:
        return User.objects.get(id=user_id, is_active=True)
    except User.DoesNotExist:
        return None


def register_user(payload: RegisterIn) -> Optional[User]:
    """
    Create an active account.

    Returns None when the username is already taken.
    """
    username = payload.username.strip()
    if User.objects.filter(username__iexact=username).exists():
        return None

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=username,
                email=payload.email or "",
                password=payload.password,
                is_active=True,
            )
    except IntegrityError:
        # Lost a race with a concurrent registration of the same name
        return None

    logger.info(f"Registered user {user.id}")
    return user
