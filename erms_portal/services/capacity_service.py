"""
Capacity arithmetic shared by the manager and engineer views.

Available capacity is max capacity minus the sum of active allocation
percentages. None of this is authoritative; the ERMS API enforces the real
limits.
"""
import math
from typing import Iterable, List, Optional

from ..models.assignment import Assignment
from ..models.user import FULL_TIME_CAPACITY, Engineer

ACTIVE = "active"


class AllocationExceededError(ValueError):
    def __init__(self, requested: float, allowed: float):
        self.requested = requested
        self.allowed = allowed
        super().__init__(f"Cannot allocate {fmt_pct(requested)}%. Only {fmt_pct(allowed)}% available.")


def fmt_pct(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def max_capacity(value: Optional[float]) -> float:
    return value or FULL_TIME_CAPACITY


def active_assignments(assignments: Iterable[Assignment]) -> List[Assignment]:
    return [a for a in assignments if a.status == ACTIVE]


def active_allocation(assignments: Iterable[Assignment], engineer_id: Optional[str] = None) -> float:
    """Sum active allocation percentages, optionally for one engineer only."""
    total = 0.0
    for a in active_assignments(assignments):
        if engineer_id is not None and a.engineer_ref != engineer_id:
            continue
        total += a.allocationPercentage or 0
    return total


def available_capacity(capacity: Optional[float], allocated: float) -> float:
    return max(0.0, max_capacity(capacity) - allocated)


def round_half_up(value: float) -> int:
    """2.5 -> 3; the built-in round() would give 2."""
    return math.floor(value + 0.5)


def percent(part: float, whole: float) -> int:
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def current_allocation(engineer: Engineer, assignments: Iterable[Assignment]) -> float:
    """Prefer the server's figure; fall back to summing active assignments."""
    if engineer.currentAllocation is not None:
        return engineer.currentAllocation
    return active_allocation(assignments, engineer.id)


def engineer_available(engineer: Engineer, assignments: Iterable[Assignment]) -> float:
    if engineer.availableCapacity is not None:
        return engineer.availableCapacity
    return available_capacity(engineer.maxCapacity, active_allocation(assignments, engineer.id))


def max_allowed_allocation(available: float, editing_allocation: float = 0) -> float:
    """An edited assignment may keep its own share on top of what is free."""
    return available + (editing_allocation or 0)


def check_allocation(requested: float, available: float, editing_allocation: float = 0) -> None:
    allowed = max_allowed_allocation(available, editing_allocation)
    if requested > allowed:
        raise AllocationExceededError(requested, allowed)


def team_utilization(engineers: Iterable[Engineer], assignments: Iterable[Assignment]) -> dict:
    assignments = list(assignments)
    engineers = list(engineers)
    total_capacity = sum(max_capacity(e.maxCapacity) for e in engineers)
    total_utilized = sum(current_allocation(e, assignments) for e in engineers)
    return {
        "totalCapacity": total_capacity,
        "totalUtilized": total_utilized,
        "utilization": percent(total_utilized, total_capacity),
        "availableCapacity": percent(total_capacity - total_utilized, total_capacity),
    }


def utilization_band(percentage: float) -> str:
    if percentage > 100:
        return "over-utilized"
    if percentage >= 80:
        return "fully-utilized"
    if percentage >= 50:
        return "moderately-utilized"
    return "under-utilized"


def capacity_status(utilization: float) -> str:
    if utilization >= 90:
        return "Overloaded"
    if utilization >= 70:
        return "Optimal"
    return "Available"


def match_band(match_percentage: Optional[float]) -> str:
    match_percentage = match_percentage or 0
    if match_percentage >= 80:
        return "strong"
    if match_percentage >= 50:
        return "partial"
    if match_percentage > 0:
        return "weak"
    return "none"
