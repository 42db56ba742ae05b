from typing import List, Optional

from ..core import api_client
from ..core.cache import invalidate_resources, query_cache
from ..models.assignment import Assignment, AssignmentCreate, AssignmentUpdate
from . import capacity_service
from .engineers_service import list_engineers, list_engineers_for_project


def _to_assignments(payload) -> List[Assignment]:
    return [Assignment.model_validate(row) for row in api_client.unwrap_list(payload)]


def _to_assignment(data: Optional[dict]) -> Optional[Assignment]:
    if not data or not ("_id" in data or "id" in data):
        return None
    return Assignment.model_validate(data)


async def list_assignments(token: str) -> List[Assignment]:
    async def _load():
        return _to_assignments(await api_client.get("/assignments", token))

    return await query_cache.fetch(token, ("assignments",), _load)


async def list_assignments_for_engineer(token: str, engineer_id: str) -> List[Assignment]:
    async def _load():
        return _to_assignments(await api_client.get(f"/assignments/engineer/{engineer_id}", token))

    return await query_cache.fetch(token, ("assignments", "engineer", engineer_id), _load)


async def get_assignment(token: str, assignment_id: str) -> Optional[Assignment]:
    async def _load():
        return _to_assignment(api_client.unwrap_object(await api_client.get(f"/assignments/{assignment_id}", token)))

    return await query_cache.fetch(token, ("assignments", "id", assignment_id), _load)


async def available_for(token: str, project_id: str, engineer_id: str) -> Optional[float]:
    """Free capacity of an engineer as seen from the project's candidate list.

    Falls back to the engineer's capacity minus the cached active
    assignments when the server omits the figure or the engineer is not a
    candidate for the project. Returns None for an unknown engineer.
    """
    candidates = await list_engineers_for_project(token, project_id)
    engineer = next((e for e in candidates if e.id == engineer_id), None)
    if engineer is not None and engineer.availableCapacity is not None:
        return engineer.availableCapacity

    if engineer is None:
        engineer = next((e for e in await list_engineers(token) if e.id == engineer_id), None)
        if engineer is None:
            return None
    assignments = await list_assignments(token)
    return capacity_service.engineer_available(engineer, assignments)


async def create_assignment(token: str, payload: AssignmentCreate) -> Optional[Assignment]:
    available = await available_for(token, payload.projectId, payload.engineerId)
    if available is not None:
        capacity_service.check_allocation(payload.allocationPercentage, available)

    saved = api_client.unwrap_object(await api_client.post("/assignments", token, payload.model_dump(mode="json")))
    invalidate_resources()
    return _to_assignment(saved)


async def update_assignment(token: str, assignment_id: str, payload: AssignmentUpdate) -> Optional[Assignment]:
    data = payload.model_dump(mode="json", exclude_unset=True)
    existing = await get_assignment(token, assignment_id)

    if existing is not None and existing.project_ref:
        engineer_id = data.get("engineerId") or existing.engineer_ref
        moved = engineer_id != existing.engineer_ref
        requested = data.get("allocationPercentage")
        if requested is None and moved:
            requested = existing.allocationPercentage
        if engineer_id and requested is not None:
            available = await available_for(token, existing.project_ref, engineer_id)
            if available is not None:
                # Only the same engineer gets its own current share back.
                own = 0 if moved else existing.allocationPercentage
                capacity_service.check_allocation(requested, available, own)

    saved = api_client.unwrap_object(await api_client.put(f"/assignments/{assignment_id}", token, data))
    invalidate_resources()
    return _to_assignment(saved)


async def delete_assignment(token: str, assignment_id: str) -> None:
    await api_client.delete(f"/assignments/{assignment_id}", token)
    invalidate_resources()
