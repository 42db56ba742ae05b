import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from . import api_client
from .api_client import ApiError
from .cache import query_cache
from .config import settings
from ..models.user import AuthenticatedUser

log = logging.getLogger(__name__)

PROFILE_KEY = ("profile",)
LOGIN_PATH = "/login"


@dataclass(frozen=True)
class UserSession:
    token: str
    user: AuthenticatedUser


class PageRedirect(Exception):
    """Raised by page dependencies; rendered as a redirect by the app."""

    def __init__(self, location: str, clear_token: bool = False):
        super().__init__(location)
        self.location = location
        self.clear_token = clear_token


def role_home(user: Optional[AuthenticatedUser]) -> str:
    return "/manager" if user is not None and user.is_manager else "/engineer"


def extract_token(request: Request) -> Optional[str]:
    authorization = request.headers.get("authorization")
    if authorization and authorization.startswith("Bearer "):
        token = authorization[len("Bearer "):].strip()
        if token:
            return token
    return request.cookies.get(settings.token_cookie_name) or None


async def load_profile(token: str) -> AuthenticatedUser:
    async def _load():
        payload = await api_client.get("/users/me", token)
        data = api_client.unwrap_object(payload)
        if not data:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Unauthorized")
        return AuthenticatedUser.model_validate(data)

    return await query_cache.fetch(token, PROFILE_KEY, _load)


async def resolve_session(request: Request) -> Optional[UserSession]:
    token = extract_token(request)
    if not token:
        return None
    try:
        user = await load_profile(token)
    except ApiError as exc:
        log.info("Profile fetch failed (%s); treating session as signed out", exc.status_code)
        query_cache.clear(token)
        return None
    return UserSession(token=token, user=user)


async def get_current_session(request: Request) -> UserSession:
    session = await resolve_session(request)
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return session


async def require_manager(session: UserSession = Depends(get_current_session)) -> UserSession:
    if not session.user.is_manager:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return session


async def page_session(request: Request) -> UserSession:
    session = await resolve_session(request)
    if session is None:
        raise PageRedirect(LOGIN_PATH, clear_token=extract_token(request) is not None)
    return session


async def manager_page(session: UserSession = Depends(page_session)) -> UserSession:
    if not session.user.is_manager:
        raise PageRedirect(role_home(session.user))
    return session


async def engineer_page(session: UserSession = Depends(page_session)) -> UserSession:
    if session.user.role == "engineer":
        return session
    if session.user.is_manager:
        raise PageRedirect(role_home(session.user))
    # Unknown account types have no home page.
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
