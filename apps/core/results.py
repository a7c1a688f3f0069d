"""
Tagged results returned by services instead of raising.

Routers turn a Failure into a `(status, {"error": message})` response via
django-ninja's multi-status `response={...}` mapping. Only expected failure
paths are modelled here; programming errors still raise.

Usage:
    from apps.core.results import Failure, BAD_REQUEST

    result = services.add_task(scope, content)
    if isinstance(result, Failure):
        return result.to_response()
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

T = TypeVar('T')

BAD_REQUEST = 400
UNAUTHORIZED = 401
NOT_FOUND = 404
SERVER_ERROR = 500


@dataclass(frozen=True)
class Failure:
    """An expected failure: HTTP-like status plus a message safe to show users."""
    status: int
    message: str

    def to_response(self) -> Tuple[int, Dict[str, str]]:
        return self.status, {"error": self.message}


@dataclass(frozen=True)
class ListResult(Generic[T]):
    """
    Items for a page load.

    `error` is set when the backend failed; `items` is then empty so the
    page can still render.
    """
    items: List[T] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def success_body(**extra: Any) -> Dict[str, Any]:
    return {"success": True, **extra}
