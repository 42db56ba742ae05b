from typing import List, Optional

from ..core import api_client
from ..core.cache import invalidate_resources, query_cache
from ..models.user import Engineer, EngineerCreate, EngineerUpdate


def _to_engineers(payload) -> List[Engineer]:
    return [Engineer.model_validate(row) for row in api_client.unwrap_list(payload)]


async def list_engineers(token: str, skill: Optional[str] = None) -> List[Engineer]:
    skill = (skill or "").strip() or None
    key = ("engineers", "skill", skill) if skill else ("engineers",)

    async def _load():
        params = {"skill": skill} if skill else None
        return _to_engineers(await api_client.get("/engineers", token, params=params))

    return await query_cache.fetch(token, key, _load)


async def list_engineers_for_project(token: str, project_id: str) -> List[Engineer]:
    """Engineers with availability and skill match for one project."""

    async def _load():
        return _to_engineers(await api_client.get(f"/engineers/by-project/{project_id}", token))

    return await query_cache.fetch(token, ("engineers", "by-project", project_id), _load)


async def get_engineer(token: str, engineer_id: str) -> Optional[Engineer]:
    async def _load():
        data = api_client.unwrap_object(await api_client.get(f"/engineers/{engineer_id}", token))
        return Engineer.model_validate(data) if data else None

    return await query_cache.fetch(token, ("engineers", "id", engineer_id), _load)


def search_engineers(engineers: List[Engineer], term: Optional[str]) -> List[Engineer]:
    term = (term or "").strip().lower()
    if not term:
        return list(engineers)
    return [
        e for e in engineers
        if term in (e.name or "").lower() or term in (e.email or "").lower()
    ]


async def create_engineer(token: str, payload: EngineerCreate) -> Optional[Engineer]:
    data = api_client.unwrap_object(await api_client.post("/users", token, payload.to_payload()))
    invalidate_resources()
    return Engineer.model_validate(data) if data and ("_id" in data or "id" in data) else None


async def update_engineer(token: str, engineer_id: str, payload: EngineerUpdate) -> Optional[Engineer]:
    data = api_client.unwrap_object(await api_client.put(f"/users/{engineer_id}", token, payload.to_payload()))
    invalidate_resources()
    return Engineer.model_validate(data) if data and ("_id" in data or "id" in data) else None


async def delete_engineer(token: str, engineer_id: str) -> None:
    await api_client.delete(f"/users/{engineer_id}", token)
    invalidate_resources()
