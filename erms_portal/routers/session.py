import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse

from ..core.auth import UserSession, extract_token, page_session, resolve_session, role_home
from ..core.config import settings
from ..models.user import LoginRequest, LoginResponse
from ..models.views import Navigation
from ..services import auth_service
from ..services.workload_service import nav_items

router = APIRouter()
log = logging.getLogger(__name__)


@router.get("/login")
async def login_page(request: Request):
    session = await resolve_session(request)
    if session is not None:
        return RedirectResponse(role_home(session.user))
    return {"authenticated": False}


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, response: Response):
    result = await auth_service.login(payload)
    response.set_cookie(
        settings.token_cookie_name,
        result.token,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    return result


@router.post("/logout")
async def logout(request: Request, response: Response):
    token = extract_token(request)
    if token:
        auth_service.logout(token)
        log.info("Session signed out")
    response.delete_cookie(settings.token_cookie_name)
    return {"ok": True, "redirectTo": "/login"}


@router.get("/")
async def home(session: UserSession = Depends(page_session)):
    return RedirectResponse(role_home(session.user))


@router.get("/navigation", response_model=Navigation)
async def navigation(session: UserSession = Depends(page_session)):
    return {"user": session.user, "initials": session.user.initials, "items": nav_items(session.user)}
