from fastapi import APIRouter, Depends

from ..core.auth import UserSession, get_current_session, page_session
from ..models.user import AuthenticatedUser, PasswordChange, ProfileUpdate
from ..services import auth_service

router = APIRouter(prefix="/profile")


@router.get("", response_model=AuthenticatedUser)
async def read_profile(session: UserSession = Depends(page_session)):
    return session.user


@router.put("", response_model=AuthenticatedUser)
async def update_profile(payload: ProfileUpdate, session: UserSession = Depends(get_current_session)):
    return await auth_service.update_profile(session, payload)


@router.post("/password")
async def change_password(payload: PasswordChange, session: UserSession = Depends(get_current_session)):
    await auth_service.change_password(session, payload)
    return {"ok": True}
