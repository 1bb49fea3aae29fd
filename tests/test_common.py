from datetime import datetime
import pytest
from sqlmodel import Field
from foundation.models.common import (
    MemberKind,
    MemberRole,
    TeamStatus,
    TeamType,
    TimestampMixin,
    member_kind_for,
    normalize_status,
    normalize_team_type,
)


def test_team_status_enum():
    assert TeamStatus.active == "active"
    assert TeamStatus.inactive == "inactive"


def test_team_type_enum():
    assert TeamType.foundation == "foundation"
    assert TeamType.temporary == "temporary"


def test_member_kind_enum():
    assert MemberKind.athlete == "athlete"
    assert MemberKind.employee == "employee"
    assert MemberKind.temporary_person == "temporary_person"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("fundacion", TeamType.foundation),
        ("Fundación", TeamType.foundation),
        ("FOUNDATION", TeamType.foundation),
        ("temporal", TeamType.temporary),
        (" Temporary ", TeamType.temporary),
        (TeamType.temporary, TeamType.temporary),
    ],
)
def test_normalize_team_type(raw, expected):
    assert normalize_team_type(raw) == expected


def test_normalize_team_type_rejects_unknown():
    with pytest.raises(ValueError, match="fundacion"):
        normalize_team_type("mixto")


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Activo", TeamStatus.active),
        ("inactivo", TeamStatus.inactive),
        ("Active", TeamStatus.active),
        ("INACTIVE", TeamStatus.inactive),
    ],
)
def test_normalize_status(raw, expected):
    assert normalize_status(raw) == expected


def test_normalize_status_rejects_unknown():
    with pytest.raises(ValueError):
        normalize_status("suspendido")


def test_member_kind_for():
    assert member_kind_for(TeamType.foundation, MemberRole.member) == MemberKind.athlete
    assert member_kind_for(TeamType.foundation, MemberRole.coach) == MemberKind.employee
    assert (
        member_kind_for(TeamType.temporary, MemberRole.member)
        == MemberKind.temporary_person
    )
    assert (
        member_kind_for(TeamType.temporary, MemberRole.coach)
        == MemberKind.temporary_person
    )


def test_timestamp_mixin():
    class StampedModel(TimestampMixin, table=True):
        __tablename__ = "test_stamped_model"
        id: int = Field(default=None, primary_key=True)

    model = StampedModel()
    assert isinstance(model.created_on, datetime)
    assert isinstance(model.updated_on, datetime)
