from typing import List

from ..models.assignment import Assignment
from ..models.user import AuthenticatedUser
from ..models.views import EngineerAssignments, EngineerProjects, EngineerWorkload, NavItem
from . import capacity_service

MANAGER_NAV = [
    NavItem(label="Dashboard", href="/manager"),
    NavItem(label="Engineers", href="/manager/engineers"),
    NavItem(label="Projects", href="/manager/projects"),
    NavItem(label="Assignments", href="/manager/assignments"),
    NavItem(label="Team Analytics", href="/manager/analytics"),
    NavItem(label="Capacity Planning", href="/manager/capacity"),
    NavItem(label="Timeline View", href="/manager/timeline"),
    NavItem(label="Skill Gap Analysis", href="/manager/skill-gap"),
]

ENGINEER_NAV = [
    NavItem(label="Dashboard", href="/engineer"),
    NavItem(label="My Assignments", href="/engineer/assignments"),
    NavItem(label="Projects", href="/engineer/projects"),
]


def nav_items(user: AuthenticatedUser) -> List[NavItem]:
    return MANAGER_NAV if user.is_manager else ENGINEER_NAV


def build_workload(user: AuthenticatedUser, assignments: List[Assignment]) -> EngineerWorkload:
    active = capacity_service.active_assignments(assignments)
    utilization = capacity_service.active_allocation(active)
    return EngineerWorkload(
        activeProjects=len(active),
        currentUtilization=utilization,
        availableCapacity=capacity_service.available_capacity(user.maxCapacity, utilization),
        assignments=assignments,
    )


def split_assignments(assignments: List[Assignment]) -> EngineerAssignments:
    return EngineerAssignments(
        active=[a for a in assignments if a.status == "active"],
        completed=[a for a in assignments if a.status == "completed"],
    )


def build_projects(assignments: List[Assignment]) -> EngineerProjects:
    return EngineerProjects(
        assignments=assignments,
        activeCount=sum(1 for a in assignments if a.status == "active"),
        completedCount=sum(1 for a in assignments if a.status == "completed"),
    )
