from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..core.auth import UserSession, require_manager
from ..models.assignment import Assignment, AssignmentCreate, AssignmentUpdate
from ..services.assignments_service import (
    create_assignment as create_assignment_service,
    delete_assignment,
    update_assignment as update_assignment_service,
)
from ..services.capacity_service import AllocationExceededError

router = APIRouter()


@router.post("/assignments", response_model=Optional[Assignment])
async def create_assignment(payload: AssignmentCreate, session: UserSession = Depends(require_manager)):
    try:
        return await create_assignment_service(session.token, payload)
    except AllocationExceededError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.put("/assignments/{assignment_id}", response_model=Optional[Assignment])
async def update_assignment(assignment_id: str, payload: AssignmentUpdate, session: UserSession = Depends(require_manager)):
    try:
        return await update_assignment_service(session.token, assignment_id, payload)
    except AllocationExceededError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.delete("/assignments/{assignment_id}")
async def remove_assignment(assignment_id: str, session: UserSession = Depends(require_manager)):
    await delete_assignment(session.token, assignment_id)
    return {"ok": True}
