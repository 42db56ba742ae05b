from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .assignment import Assignment
from .project import Project
from .user import AuthenticatedUser, Engineer


class DashboardStats(BaseModel):
    totalEngineers: int
    activeProjects: int
    utilization: int
    availableCapacity: int


class EngineerCard(BaseModel):
    engineer: Engineer
    initials: str
    topSkills: List[str]
    extraSkills: int
    currentAllocation: float
    availableCapacity: float
    utilization: int
    capacityStatus: str


class ManagerDashboard(BaseModel):
    stats: DashboardStats
    engineers: List[EngineerCard]


class EngineerList(BaseModel):
    engineers: List[Engineer]
    skill: Optional[str] = None
    search: Optional[str] = None


class ProjectList(BaseModel):
    projects: List[Project]
    status: str = "all"
    search: Optional[str] = None


class AssignmentList(BaseModel):
    assignments: List[Assignment]


class CandidateEngineer(BaseModel):
    engineer: Engineer
    availableCapacity: float
    matchBand: str
    selectable: bool


class CapacityPlanningView(BaseModel):
    insights: Dict[str, Any]
    engineers: List[Dict[str, Any]]


class SkillCount(BaseModel):
    skill: str
    count: int


class SkillGapReport(BaseModel):
    coveragePercentage: int
    missingSkills: List[str]
    underSuppliedSkills: List[str]
    overSuppliedSkills: List[str]
    inDemandSkills: List[SkillCount]
    teamSkills: Dict[str, int]
    requiredSkills: Dict[str, int]


class TimelineEntry(BaseModel):
    assignment: Assignment
    engineerName: str
    projectName: str
    duration: Optional[str] = None


class TimelineMonth(BaseModel):
    key: str
    month: str
    assignments: List[TimelineEntry]


class TimelineView(BaseModel):
    totalAssignments: int
    activeAssignments: int
    engineers: int
    projects: int
    months: List[TimelineMonth]


class EngineerWorkload(BaseModel):
    activeProjects: int
    currentUtilization: float
    availableCapacity: float
    assignments: List[Assignment]


class EngineerAssignments(BaseModel):
    active: List[Assignment]
    completed: List[Assignment]


class EngineerProjects(BaseModel):
    assignments: List[Assignment]
    activeCount: int
    completedCount: int


class NavItem(BaseModel):
    label: str
    href: str


class Navigation(BaseModel):
    user: AuthenticatedUser
    initials: str
    items: List[NavItem]
