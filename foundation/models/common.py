from datetime import datetime, timezone
from enum import Enum
from sqlmodel import SQLModel, Field
from sqlalchemy import event


class TeamStatus(str, Enum):
    active = "active"
    inactive = "inactive"


class TeamType(str, Enum):
    foundation = "foundation"
    temporary = "temporary"


class MemberKind(str, Enum):
    athlete = "athlete"
    employee = "employee"
    temporary_person = "temporary_person"


class MemberRole(str, Enum):
    member = "member"
    coach = "coach"


class PersonStatus(str, Enum):
    active = "active"
    inactive = "inactive"


class TemporaryPersonType(str, Enum):
    athlete = "athlete"
    coach = "coach"


_TEAM_TYPE_ALIASES = {
    "fundacion": TeamType.foundation,
    "fundación": TeamType.foundation,
    "foundation": TeamType.foundation,
    "temporal": TeamType.temporary,
    "temporary": TeamType.temporary,
}

_STATUS_ALIASES = {
    "activo": TeamStatus.active,
    "active": TeamStatus.active,
    "inactivo": TeamStatus.inactive,
    "inactive": TeamStatus.inactive,
}


def collapse_spaces(value) -> str:
    """Trim and squeeze runs of whitespace to a single space."""
    return " ".join(str(value).split())


def normalize_team_type(value) -> TeamType:
    """Map the accepted spellings ("fundacion", "Temporal", ...) to a TeamType."""
    if isinstance(value, TeamType):
        return value
    team_type = _TEAM_TYPE_ALIASES.get(str(value).strip().lower())
    if team_type is None:
        raise ValueError(
            'Team type must be "fundacion" or "temporal" '
            f"(got {value!r})"
        )
    return team_type


def normalize_status(value) -> TeamStatus:
    """Map "Activo"/"Inactivo"/"Active"/"Inactive" (any case) to a TeamStatus."""
    if isinstance(value, TeamStatus):
        return value
    status = _STATUS_ALIASES.get(str(value).strip().lower())
    if status is None:
        raise ValueError(
            'Status must be "Activo", "Inactivo", "Active" or "Inactive" '
            f"(got {value!r})"
        )
    return status


def member_kind_for(team_type: TeamType, role: MemberRole) -> MemberKind:
    """Person kind a team of the given type expects in the given slot."""
    if team_type == TeamType.temporary:
        return MemberKind.temporary_person
    if role == MemberRole.coach:
        return MemberKind.employee
    return MemberKind.athlete


def utc_now():
    return datetime.now(timezone.utc)


class TimestampMixin(SQLModel):
    created_on: datetime = Field(default_factory=utc_now, nullable=False)
    updated_on: datetime = Field(default_factory=utc_now, nullable=False)


@event.listens_for(TimestampMixin, "before_update", propagate=True)
def update_timestamp(mapper, connection, target):
    target.updated_on = datetime.now(timezone.utc)
