import math
from collections import Counter
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Iterable, List, Optional

from ..core import api_client
from ..core.cache import query_cache
from ..models.assignment import Assignment
from ..models.project import Project
from ..models.user import Engineer, initials
from ..models.views import (
    DashboardStats,
    EngineerCard,
    ManagerDashboard,
    SkillCount,
    SkillGapReport,
    TimelineEntry,
    TimelineMonth,
    TimelineView,
)
from . import capacity_service

TOP_SKILLS_SHOWN = 4
IN_DEMAND_LIMIT = 10
SECONDS_PER_DAY = 24 * 60 * 60


async def get_team_analytics(token: str) -> Dict[str, Any]:
    async def _load():
        return api_client.unwrap_object(await api_client.get("/analytics/team", token)) or {}

    return await query_cache.fetch(token, ("analytics", "team"), _load)


async def get_capacity_planning(token: str) -> Dict[str, Any]:
    async def _load():
        return api_client.unwrap_object(await api_client.get("/analytics/capacity", token)) or {}

    return await query_cache.fetch(token, ("analytics", "capacity"), _load)


def annotate_capacity(planning: Dict[str, Any]) -> Dict[str, Any]:
    """Add the utilisation band to every engineer of a capacity report."""
    engineers = []
    for row in planning.get("engineers") or []:
        row = dict(row)
        utilization = row.get("utilizationPercentage") or 0
        row["utilizationBand"] = capacity_service.utilization_band(utilization)
        row["barWidth"] = min(100, utilization)
        row["initials"] = initials(row.get("name"))
        engineers.append(row)
    return {"insights": planning.get("insights") or {}, "engineers": engineers}


def build_manager_dashboard(
    engineers: List[Engineer], projects: List[Project], assignments: List[Assignment]
) -> ManagerDashboard:
    team = capacity_service.team_utilization(engineers, assignments)
    stats = DashboardStats(
        totalEngineers=len(engineers),
        activeProjects=sum(1 for p in projects if p.status == "active"),
        utilization=team["utilization"],
        availableCapacity=team["availableCapacity"],
    )

    cards = []
    for engineer in engineers:
        allocated = capacity_service.current_allocation(engineer, assignments)
        capacity = capacity_service.max_capacity(engineer.maxCapacity)
        utilization = capacity_service.percent(allocated, capacity)
        cards.append(
            EngineerCard(
                engineer=engineer,
                initials=initials(engineer.name),
                topSkills=engineer.skills[:TOP_SKILLS_SHOWN],
                extraSkills=max(0, len(engineer.skills) - TOP_SKILLS_SHOWN),
                currentAllocation=allocated,
                availableCapacity=capacity_service.available_capacity(engineer.maxCapacity, allocated),
                utilization=utilization,
                capacityStatus=capacity_service.capacity_status(utilization),
            )
        )
    return ManagerDashboard(stats=stats, engineers=cards)


def _count_skills(skill_lists: Iterable[List[str]]) -> Counter:
    counts: Counter = Counter()
    for skills in skill_lists:
        for skill in skills or []:
            counts[skill] += 1
    return counts


def build_skill_gap(engineers: List[Engineer], projects: List[Project]) -> SkillGapReport:
    team = _count_skills(e.skills for e in engineers)
    required = _count_skills(p.requiredSkills for p in projects)

    missing = [skill for skill in required if not team[skill]]
    under = [skill for skill in required if team[skill] and team[skill] < required[skill]]
    over = [skill for skill in team if not required[skill] or team[skill] > required[skill]]
    # Stable sort keeps first-seen order among equal counts.
    in_demand = sorted(required.items(), key=lambda item: item[1], reverse=True)[:IN_DEMAND_LIMIT]

    total_required = len(required)
    coverage = capacity_service.percent(total_required - len(missing), total_required) if total_required else 100

    return SkillGapReport(
        coveragePercentage=coverage,
        missingSkills=missing,
        underSuppliedSkills=under,
        overSuppliedSkills=over,
        inDemandSkills=[SkillCount(skill=skill, count=count) for skill, count in in_demand],
        teamSkills=dict(team),
        requiredSkills=dict(required),
    )


def _to_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    trimmed = value.strip()
    if trimmed.endswith("Z"):
        trimmed = trimmed[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(trimmed)
    except ValueError:
        try:
            parsed = datetime.combine(date.fromisoformat(trimmed[:10]), time.min)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def describe_duration(start: Optional[str], end: Optional[str]) -> Optional[str]:
    start_at, end_at = _to_datetime(start), _to_datetime(end)
    if start_at is None or end_at is None:
        return None
    # A started day counts as a whole one.
    days = math.ceil(abs((end_at - start_at).total_seconds()) / SECONDS_PER_DAY)
    if days < 30:
        return f"{days} days"
    if days < 365:
        return f"{capacity_service.round_half_up(days / 30)} months"
    return f"{capacity_service.round_half_up(days / 365)} years"


def build_timeline(assignments: List[Assignment]) -> TimelineView:
    months: Dict[str, TimelineMonth] = {}
    for assignment in assignments:
        start = _to_datetime(assignment.startDate)
        if start is None:
            continue
        key = start.strftime("%Y-%m")
        if key not in months:
            months[key] = TimelineMonth(key=key, month=start.strftime("%B %Y"), assignments=[])
        months[key].assignments.append(
            TimelineEntry(
                assignment=assignment,
                engineerName=assignment.engineer_name,
                projectName=assignment.project_name,
                duration=describe_duration(assignment.startDate, assignment.endDate),
            )
        )

    return TimelineView(
        totalAssignments=len(assignments),
        activeAssignments=sum(1 for a in assignments if a.status == capacity_service.ACTIVE),
        engineers=len({a.engineer_ref for a in assignments}),
        projects=len({a.project_ref for a in assignments}),
        months=[months[key] for key in sorted(months, reverse=True)],
    )
