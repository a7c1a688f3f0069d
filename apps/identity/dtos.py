"""DTOs for Identity app."""
from dataclasses import dataclass
from uuid import UUID
from typing import Optional


@dataclass(frozen=True)
class UserDTO:
    id: UUID
    username: str
    email: str
    is_active: bool


from ninja import Schema


class RegisterIn(Schema):
    username: str
    password: str
    email: Optional[str] = ""


class LoginIn(Schema):
    username: str
    password: str
