import asyncio
from typing import Optional

from fastapi import APIRouter, Depends

from ..core.auth import UserSession, manager_page
from ..models.views import (
    AssignmentList,
    CapacityPlanningView,
    EngineerList,
    ManagerDashboard,
    ProjectList,
    SkillGapReport,
    TimelineView,
)
from ..services import analytics_service
from ..services.assignments_service import list_assignments
from ..services.engineers_service import list_engineers, search_engineers
from ..services.projects_service import ALL_STATUSES, filter_projects, list_projects

router = APIRouter(prefix="/manager")


@router.get("", response_model=ManagerDashboard)
async def dashboard(session: UserSession = Depends(manager_page)):
    engineers, projects, assignments = await asyncio.gather(
        list_engineers(session.token),
        list_projects(session.token),
        list_assignments(session.token),
    )
    return analytics_service.build_manager_dashboard(engineers, projects, assignments)


@router.get("/engineers", response_model=EngineerList)
async def engineers_page(
    search: Optional[str] = None,
    skill: Optional[str] = None,
    session: UserSession = Depends(manager_page),
):
    engineers = await list_engineers(session.token, skill)
    return {"engineers": search_engineers(engineers, search), "skill": skill or None, "search": search}


@router.get("/projects", response_model=ProjectList)
async def projects_page(
    search: Optional[str] = None,
    status: str = ALL_STATUSES,
    session: UserSession = Depends(manager_page),
):
    projects = await list_projects(session.token)
    return {"projects": filter_projects(projects, search, status), "status": status, "search": search}


@router.get("/assignments", response_model=AssignmentList)
async def assignments_page(session: UserSession = Depends(manager_page)):
    return {"assignments": await list_assignments(session.token)}


@router.get("/analytics")
async def analytics_page(session: UserSession = Depends(manager_page)):
    return await analytics_service.get_team_analytics(session.token)


@router.get("/capacity", response_model=CapacityPlanningView)
async def capacity_page(session: UserSession = Depends(manager_page)):
    planning = await analytics_service.get_capacity_planning(session.token)
    return analytics_service.annotate_capacity(planning)


@router.get("/timeline", response_model=TimelineView)
async def timeline_page(session: UserSession = Depends(manager_page)):
    assignments = await list_assignments(session.token)
    return analytics_service.build_timeline(assignments)


@router.get("/skill-gap", response_model=SkillGapReport)
async def skill_gap_page(session: UserSession = Depends(manager_page)):
    engineers, projects = await asyncio.gather(list_engineers(session.token), list_projects(session.token))
    return analytics_service.build_skill_gap(engineers, projects)
