from typing import List, Optional

from fastapi import APIRouter, Depends

from ..core.auth import UserSession, require_manager
from ..models.user import Engineer, EngineerCreate, EngineerUpdate
from ..models.views import CandidateEngineer
from ..services import capacity_service
from ..services.assignments_service import list_assignments
from ..services.engineers_service import (
    create_engineer as create_engineer_service,
    delete_engineer,
    list_engineers_for_project,
    update_engineer as update_engineer_service,
)

router = APIRouter()


@router.get("/engineers/by-project/{project_id}", response_model=List[CandidateEngineer])
async def project_candidates(project_id: str, session: UserSession = Depends(require_manager)):
    engineers = await list_engineers_for_project(session.token, project_id)
    assignments = [] if all(e.availableCapacity is not None for e in engineers) else await list_assignments(session.token)
    candidates = []
    for engineer in engineers:
        available = capacity_service.engineer_available(engineer, assignments)
        candidates.append(
            {
                "engineer": engineer,
                "availableCapacity": available,
                "matchBand": capacity_service.match_band(engineer.matchPercentage),
                "selectable": available > 0,
            }
        )
    return candidates


@router.post("/engineers", response_model=Optional[Engineer])
async def create_engineer(payload: EngineerCreate, session: UserSession = Depends(require_manager)):
    return await create_engineer_service(session.token, payload)


@router.put("/engineers/{engineer_id}", response_model=Optional[Engineer])
async def update_engineer(engineer_id: str, payload: EngineerUpdate, session: UserSession = Depends(require_manager)):
    return await update_engineer_service(session.token, engineer_id, payload)


@router.delete("/engineers/{engineer_id}")
async def remove_engineer(engineer_id: str, session: UserSession = Depends(require_manager)):
    await delete_engineer(session.token, engineer_id)
    return {"ok": True}
