from fastapi import APIRouter, Depends

from ..core.auth import UserSession, engineer_page
from ..models.views import EngineerAssignments, EngineerProjects, EngineerWorkload
from ..services import workload_service
from ..services.assignments_service import list_assignments_for_engineer

router = APIRouter(prefix="/engineer")


@router.get("", response_model=EngineerWorkload)
async def dashboard(session: UserSession = Depends(engineer_page)):
    assignments = await list_assignments_for_engineer(session.token, session.user.id)
    return workload_service.build_workload(session.user, assignments)


@router.get("/assignments", response_model=EngineerAssignments)
async def my_assignments(session: UserSession = Depends(engineer_page)):
    assignments = await list_assignments_for_engineer(session.token, session.user.id)
    return workload_service.split_assignments(assignments)


@router.get("/projects", response_model=EngineerProjects)
async def my_projects(session: UserSession = Depends(engineer_page)):
    assignments = await list_assignments_for_engineer(session.token, session.user.id)
    return workload_service.build_projects(assignments)
