from datetime import date
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .user import dedupe_skills

ProjectStatus = Literal["planning", "active", "completed"]


class Project(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    name: str = ""
    description: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    requiredSkills: List[str] = Field(default_factory=list)
    teamSize: Optional[int] = None
    status: Optional[str] = None
    managerId: Optional[str] = None


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    startDate: date
    endDate: date
    requiredSkills: List[str] = Field(default_factory=list)
    teamSize: int = Field(default=1, ge=1)
    status: ProjectStatus = "planning"

    normalize_skills = field_validator("requiredSkills")(dedupe_skills)

    @model_validator(mode="after")
    def check_dates(self):
        if self.endDate < self.startDate:
            raise ValueError("endDate must not be before startDate")
        return self


class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    startDate: Optional[date] = None
    endDate: Optional[date] = None
    requiredSkills: Optional[List[str]] = None
    teamSize: Optional[int] = Field(default=None, ge=1)
    status: Optional[ProjectStatus] = None

    normalize_skills = field_validator("requiredSkills")(dedupe_skills)

    @model_validator(mode="after")
    def check_dates(self):
        if self.startDate and self.endDate and self.endDate < self.startDate:
            raise ValueError("endDate must not be before startDate")
        return self
