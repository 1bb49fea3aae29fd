from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from sqlmodel import Field
from sqlalchemy import CheckConstraint
from .common import (
    TimestampMixin,
    TeamStatus,
    TeamType,
    MemberKind,
    MemberRole,
    utc_now,
)


@dataclass(frozen=True)
class MemberRef:
    """A person referenced by a membership: one kind, one id."""

    kind: MemberKind
    person_id: int

    @classmethod
    def athlete(cls, person_id: int) -> "MemberRef":
        return cls(MemberKind.athlete, person_id)

    @classmethod
    def employee(cls, person_id: int) -> "MemberRef":
        return cls(MemberKind.employee, person_id)

    @classmethod
    def temporary(cls, person_id: int) -> "MemberRef":
        return cls(MemberKind.temporary_person, person_id)

    @property
    def is_temporary(self) -> bool:
        return self.kind == MemberKind.temporary_person


class Team(TimestampMixin, table=True):
    __tablename__ = "teams"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, index=True)
    coach: Optional[str] = Field(default=None)
    category: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)
    description: Optional[str] = Field(default=None)
    status: TeamStatus = Field(default=TeamStatus.active, nullable=False)
    team_type: TeamType = Field(nullable=False)
    deleted_at: Optional[datetime] = Field(default=None)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class TeamMember(TimestampMixin, table=True):
    __tablename__ = "team_members"
    __table_args__ = (
        CheckConstraint(
            "(CASE WHEN athlete_id IS NOT NULL THEN 1 ELSE 0 END)"
            " + (CASE WHEN employee_id IS NOT NULL THEN 1 ELSE 0 END)"
            " + (CASE WHEN temporary_person_id IS NOT NULL THEN 1 ELSE 0 END) = 1",
            name="ck_team_members_single_person",
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="teams.id", nullable=False, index=True)
    member_kind: MemberKind = Field(nullable=False)
    athlete_id: Optional[int] = Field(default=None, foreign_key="athletes.id")
    employee_id: Optional[int] = Field(default=None, foreign_key="employees.id")
    temporary_person_id: Optional[int] = Field(
        default=None, foreign_key="temporary_persons.id", index=True
    )
    role: MemberRole = Field(default=MemberRole.member, nullable=False)
    is_active: bool = Field(default=True, nullable=False)
    joined_at: datetime = Field(default_factory=utc_now, nullable=False)

    @classmethod
    def for_ref(
        cls,
        team_id: int,
        ref: MemberRef,
        role: MemberRole = MemberRole.member,
        joined_at: Optional[datetime] = None,
    ) -> "TeamMember":
        columns = {
            MemberKind.athlete: "athlete_id",
            MemberKind.employee: "employee_id",
            MemberKind.temporary_person: "temporary_person_id",
        }
        member = cls(team_id=team_id, member_kind=ref.kind, role=role)
        setattr(member, columns[ref.kind], ref.person_id)
        if joined_at is not None:
            member.joined_at = joined_at
        return member

    @property
    def ref(self) -> MemberRef:
        if self.member_kind == MemberKind.athlete:
            return MemberRef.athlete(self.athlete_id)
        if self.member_kind == MemberKind.employee:
            return MemberRef.employee(self.employee_id)
        return MemberRef.temporary(self.temporary_person_id)

    @property
    def is_coach(self) -> bool:
        # Employees only ever sit in the coach slot
        return self.role == MemberRole.coach or self.member_kind == MemberKind.employee
