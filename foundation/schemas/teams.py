from datetime import datetime
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from foundation.models.common import (
    TeamStatus,
    TeamType,
    MemberKind,
    collapse_spaces,
    normalize_status,
    normalize_team_type,
)


def _trimmed(value: Optional[str], *, label: str, min_length: int = 0, max_length: int) -> Optional[str]:
    if value is None:
        return None
    value = collapse_spaces(value)
    if not value:
        return None
    if len(value) < min_length:
        raise ValueError(f"{label} must be between {min_length} and {max_length} characters.")
    if len(value) > max_length:
        if min_length:
            raise ValueError(f"{label} must be between {min_length} and {max_length} characters.")
        raise ValueError(f"{label} cannot exceed {max_length} characters.")
    return value


class MemberRefIn(BaseModel):
    """Roster or coach reference sent by the client. `type` is "fundacion" or "temporal"."""

    id: int = Field(gt=0)
    type: Optional[str] = None


RosterEntryIn = Union[int, MemberRefIn]


class TeamPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, alias="nombre")
    team_type: Optional[TeamType] = Field(default=None, alias="teamType")
    status: Optional[TeamStatus] = Field(default=None, alias="estado")
    coach_label: Optional[str] = Field(default=None, alias="entrenador")
    athletes: Optional[List[RosterEntryIn]] = Field(default=None, alias="deportistasIds")
    coach: Optional[MemberRefIn] = Field(default=None, alias="entrenadorData")
    phone: Optional[str] = Field(default=None, alias="telefono")
    category: Optional[str] = Field(default=None, alias="categoria")
    description: Optional[str] = Field(default=None, alias="descripcion")

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value):
        if value is None:
            return None
        trimmed = _trimmed(value, label="Team name", min_length=3, max_length=100)
        if trimmed is None:
            raise ValueError("Team name is required.")
        return trimmed

    @field_validator("team_type", mode="before")
    @classmethod
    def _check_team_type(cls, value):
        if value is None:
            return None
        return normalize_team_type(value)

    @field_validator("status", mode="before")
    @classmethod
    def _check_status(cls, value):
        if value is None:
            return None
        return normalize_status(value)

    @field_validator("coach_label", mode="before")
    @classmethod
    def _check_coach_label(cls, value):
        return _trimmed(value, label="Coach", min_length=2, max_length=200)

    @field_validator("phone", mode="before")
    @classmethod
    def _check_phone(cls, value):
        return _trimmed(value, label="Phone", min_length=7, max_length=15)

    @field_validator("category", mode="before")
    @classmethod
    def _check_category(cls, value):
        return _trimmed(value, label="Category", max_length=50)

    @field_validator("description", mode="before")
    @classmethod
    def _check_description(cls, value):
        return _trimmed(value, label="Description", max_length=500)


class TeamCreate(TeamPayload):
    name: str = Field(alias="nombre")
    team_type: TeamType = Field(alias="teamType")
    status: TeamStatus = Field(default=TeamStatus.active, alias="estado")
    athletes: List[RosterEntryIn] = Field(default_factory=list, alias="deportistasIds")


class TeamUpdate(TeamPayload):
    """Partial update. Omitted roster/coach keep the current membership;
    an explicit `entrenadorData: null` removes the coach."""


class StatusChange(BaseModel):
    status: TeamStatus

    @field_validator("status", mode="before")
    @classmethod
    def _check_status(cls, value):
        if value is None or str(value).strip() == "":
            raise ValueError("Status is required.")
        return normalize_status(value)


class MemberDisplay(BaseModel):
    id: int
    name: str
    identification: Optional[str] = None
    category: Optional[str] = None
    kind: MemberKind


class TeamRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str = Field(alias="nombre")
    phone: Optional[str] = Field(default=None, alias="telefono")
    coach_label: Optional[str] = Field(default=None, alias="entrenador")
    status: str = Field(alias="estado")
    description: Optional[str] = Field(default=None, alias="descripcion")
    category: Optional[str] = Field(default=None, alias="categoria")
    team_type: TeamType = Field(alias="teamType")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    roster: List[MemberDisplay] = Field(default_factory=list, alias="deportistas")
    athlete_ids: List[int] = Field(default_factory=list, alias="deportistasIds")
    athlete_count: int = Field(default=0, alias="cantidadDeportistas")
    coach: Optional[MemberDisplay] = Field(default=None, alias="entrenadorData")


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")


class TeamPage(BaseModel):
    data: List[TeamRead]
    pagination: Pagination


class NameAvailability(BaseModel):
    available: bool
    message: str


class TeamStats(BaseModel):
    total: int
    active: int
    inactive: int
    foundation: int
    temporary: int


class DeleteResult(BaseModel):
    success: bool = True
    message: str
