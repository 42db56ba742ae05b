from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..core.auth import UserSession, get_current_session, require_manager
from ..models.project import Project, ProjectCreate, ProjectUpdate
from ..services.projects_service import (
    create_project as create_project_service,
    delete_project,
    get_project,
    update_project as update_project_service,
)

router = APIRouter()


@router.get("/projects/{project_id}", response_model=Project)
async def read_project(project_id: str, session: UserSession = Depends(get_current_session)):
    project = await get_project(session.token, project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post("/projects", response_model=Optional[Project])
async def create_project(payload: ProjectCreate, session: UserSession = Depends(require_manager)):
    return await create_project_service(session.token, payload, session.user.id)


@router.put("/projects/{project_id}", response_model=Optional[Project])
async def update_project(project_id: str, payload: ProjectUpdate, session: UserSession = Depends(require_manager)):
    return await update_project_service(session.token, project_id, payload)


@router.delete("/projects/{project_id}")
async def remove_project(project_id: str, session: UserSession = Depends(require_manager)):
    await delete_project(session.token, project_id)
    return {"ok": True}
