from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

Seniority = Literal["junior", "mid", "senior"]
EmploymentType = Literal["full-time", "part-time"]

FULL_TIME_CAPACITY = 100
PART_TIME_CAPACITY = 50


def dedupe_skills(skills: Optional[List[str]]) -> List[str]:
    seen: List[str] = []
    for skill in skills or []:
        skill = skill.strip()
        if skill and skill not in seen:
            seen.append(skill)
    return seen


class AuthenticatedUser(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    email: Optional[str] = None
    name: str = ""
    type: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    seniority: Optional[str] = None
    department: Optional[str] = None
    maxCapacity: Optional[int] = None
    employmentType: Optional[str] = None

    @property
    def role(self) -> str:
        return (self.type or "").lower()

    @property
    def is_manager(self) -> bool:
        return self.role == "manager"

    @property
    def initials(self) -> str:
        return initials(self.name) or "U"


class Engineer(AuthenticatedUser):
    currentAllocation: Optional[float] = None
    availableCapacity: Optional[float] = None
    matchPercentage: Optional[float] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    token: str
    user: AuthenticatedUser
    redirectTo: str


class EngineerCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    type: Literal["Engineer", "Manager"] = "Engineer"
    skills: List[str] = Field(default_factory=list)
    seniority: Seniority = "junior"
    department: str = ""
    employmentType: EmploymentType = "full-time"
    maxCapacity: int = FULL_TIME_CAPACITY

    normalize_skills = field_validator("skills")(dedupe_skills)

    def to_payload(self) -> dict:
        data = self.model_dump()
        data["maxCapacity"] = PART_TIME_CAPACITY if self.employmentType == "part-time" else FULL_TIME_CAPACITY
        return data


class EngineerUpdate(BaseModel):
    name: Optional[str] = None
    skills: Optional[List[str]] = None
    seniority: Optional[Seniority] = None
    department: Optional[str] = None
    employmentType: Optional[EmploymentType] = None

    def to_payload(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        if "skills" in data:
            data["skills"] = dedupe_skills(data["skills"])
        if "employmentType" in data and data["employmentType"]:
            data["maxCapacity"] = PART_TIME_CAPACITY if data["employmentType"] == "part-time" else FULL_TIME_CAPACITY
        return data


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    department: Optional[str] = None
    seniority: Optional[Seniority] = None
    skills: Optional[List[str]] = None

    normalize_skills = field_validator("skills")(dedupe_skills)


class PasswordChange(BaseModel):
    oldPassword: str
    newPassword: str = Field(min_length=1)


def initials(name: Optional[str], limit: int = 2) -> str:
    parts = [part for part in (name or "").split(" ") if part]
    return "".join(part[0] for part in parts)[:limit].upper()
