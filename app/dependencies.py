from dataclasses import dataclass

from fastapi import Request

from app.config import settings


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated caller, as identified by the auth provider."""

    id: str


def get_current_user(request: Request) -> CurrentUser | None:
    """
    Resolve the caller from the identity header set upstream.

    Sessions are established by an external provider (gateway or session
    middleware) which forwards the user id in ``settings.AUTH_USER_HEADER``.
    Returns None for anonymous requests; the service layer decides whether
    that is acceptable via ``require_user``.

    Usage in a router::

        @router.get("/posts")
        async def list_posts(user: CurrentUser | None = Depends(get_current_user)):
            ...
    """
    user_id = request.headers.get(settings.AUTH_USER_HEADER, "").strip()
    if not user_id:
        return None
    return CurrentUser(id=user_id)
