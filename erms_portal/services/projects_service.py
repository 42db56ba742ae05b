from typing import List, Optional

from ..core import api_client
from ..core.cache import invalidate_resources, query_cache
from ..models.project import Project, ProjectCreate, ProjectUpdate

ALL_STATUSES = "all"


def _to_project(data: Optional[dict]) -> Optional[Project]:
    if not data or not ("_id" in data or "id" in data):
        return None
    return Project.model_validate(data)


async def list_projects(token: str) -> List[Project]:
    async def _load():
        rows = api_client.unwrap_list(await api_client.get("/projects", token))
        return [Project.model_validate(row) for row in rows]

    return await query_cache.fetch(token, ("projects",), _load)


async def get_project(token: str, project_id: str) -> Optional[Project]:
    async def _load():
        return _to_project(api_client.unwrap_object(await api_client.get(f"/projects/{project_id}", token)))

    return await query_cache.fetch(token, ("projects", "id", project_id), _load)


def filter_projects(projects: List[Project], search: Optional[str] = None, status: Optional[str] = None) -> List[Project]:
    term = (search or "").strip().lower()
    status = status or ALL_STATUSES
    results = []
    for project in projects:
        matches_search = not term or term in (project.name or "").lower() or term in (project.description or "").lower()
        matches_status = status == ALL_STATUSES or project.status == status
        if matches_search and matches_status:
            results.append(project)
    return results


async def create_project(token: str, payload: ProjectCreate, manager_id: str) -> Optional[Project]:
    data = payload.model_dump(mode="json")
    data["managerId"] = manager_id
    saved = api_client.unwrap_object(await api_client.post("/projects", token, data))
    invalidate_resources()
    return _to_project(saved)


async def update_project(token: str, project_id: str, payload: ProjectUpdate) -> Optional[Project]:
    data = payload.model_dump(mode="json", exclude_unset=True)
    saved = api_client.unwrap_object(await api_client.put(f"/projects/{project_id}", token, data))
    invalidate_resources()
    return _to_project(saved)


async def delete_project(token: str, project_id: str) -> None:
    await api_client.delete(f"/projects/{project_id}", token)
    invalidate_resources()
