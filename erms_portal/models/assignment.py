from datetime import date
from typing import Any, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

AssignmentStatus = Literal["active", "completed", "cancelled"]

DEFAULT_ALLOCATION = 50


class Assignment(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    # Either a bare id or the populated record
    engineerId: Union[str, dict, None] = None
    projectId: Union[str, dict, None] = None
    allocationPercentage: float = 0
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None

    @property
    def engineer_ref(self) -> Optional[str]:
        return ref_id(self.engineerId)

    @property
    def project_ref(self) -> Optional[str]:
        return ref_id(self.projectId)

    @property
    def engineer_name(self) -> str:
        return ref_field(self.engineerId, "name") or "Unknown Engineer"

    @property
    def project_name(self) -> str:
        return ref_field(self.projectId, "name") or "Unknown Project"


class AssignmentCreate(BaseModel):
    engineerId: str = Field(min_length=1)
    projectId: str = Field(min_length=1)
    allocationPercentage: int = Field(default=DEFAULT_ALLOCATION, ge=1, le=100)
    startDate: date
    endDate: date
    role: str = ""

    @model_validator(mode="after")
    def check_dates(self):
        if self.endDate < self.startDate:
            raise ValueError("endDate must not be before startDate")
        return self


class AssignmentUpdate(BaseModel):
    engineerId: Optional[str] = None
    allocationPercentage: Optional[int] = Field(default=None, ge=1, le=100)
    startDate: Optional[date] = None
    endDate: Optional[date] = None
    role: Optional[str] = None
    status: Optional[AssignmentStatus] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.startDate and self.endDate and self.endDate < self.startDate:
            raise ValueError("endDate must not be before startDate")
        return self


def ref_id(ref: Any) -> Optional[str]:
    if isinstance(ref, dict):
        value = ref.get("_id") or ref.get("id")
        return str(value) if value else None
    return str(ref) if ref else None


def ref_field(ref: Any, field: str) -> Optional[Any]:
    if isinstance(ref, dict):
        return ref.get(field)
    return None
