import logging

from fastapi import status

from ..core import api_client
from ..core.api_client import ApiError
from ..core.auth import PROFILE_KEY, UserSession, role_home
from ..core.cache import query_cache
from ..models.user import AuthenticatedUser, LoginRequest, LoginResponse, PasswordChange, ProfileUpdate

log = logging.getLogger(__name__)


async def login(credentials: LoginRequest) -> LoginResponse:
    payload = await api_client.post("/users/login", None, credentials.model_dump())
    if not isinstance(payload, dict) or not payload.get("accessToken"):
        raise ApiError(status.HTTP_502_BAD_GATEWAY, "Login response did not include a token")

    token = payload["accessToken"]
    user_data = payload.get("data") or payload.get("user")
    if not isinstance(user_data, dict):
        raise ApiError(status.HTTP_502_BAD_GATEWAY, "Login response did not include a user")

    user = AuthenticatedUser.model_validate(user_data)
    # Stale entries from an earlier session with the same token.
    query_cache.clear(token)
    log.info("User %s signed in as %s", user.id, user.type)
    return LoginResponse(token=token, user=user, redirectTo=role_home(user))


def logout(token: str) -> None:
    query_cache.clear(token)


async def update_profile(session: UserSession, changes: ProfileUpdate) -> AuthenticatedUser:
    data = changes.model_dump(exclude_unset=True)
    payload = await api_client.put(f"/users/{session.user.id}", session.token, data)
    query_cache.invalidate(PROFILE_KEY, ("engineers",))

    updated = api_client.unwrap_object(payload)
    merged = session.user.model_dump()
    # The server may answer with an envelope that lacks the record.
    merged.update(data)
    if updated and updated.get("_id", updated.get("id")) == session.user.id:
        merged.update(updated)
    return AuthenticatedUser.model_validate(merged)


async def change_password(session: UserSession, change: PasswordChange) -> None:
    await api_client.post("/users/change-password", session.token, change.model_dump())
