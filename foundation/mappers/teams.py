from typing import Dict, List, Optional

from foundation.models.common import TeamStatus
from foundation.models.people import Athlete, TemporaryPerson
from foundation.models.team import MemberRef, Team, TeamMember
from foundation.repos.teams_repo import Person
from foundation.schemas.teams import MemberDisplay, TeamRead

STATUS_LABELS = {
    TeamStatus.active: "Activo",
    TeamStatus.inactive: "Inactivo",
}


def status_label(status: TeamStatus) -> str:
    """Display label used by the front end for a team status."""
    return STATUS_LABELS[status]


def to_member_display(member: TeamMember, person: Optional[Person]) -> MemberDisplay:
    """Flatten a membership and the person behind it, whatever its kind."""
    ref = member.ref
    if person is None:
        return MemberDisplay(
            id=ref.person_id, name=f"#{ref.person_id}", kind=member.member_kind
        )

    category = None
    if isinstance(person, (Athlete, TemporaryPerson)):
        category = person.category

    return MemberDisplay(
        id=person.id,
        name=person.full_name,
        identification=person.identification,
        category=category,
        kind=member.member_kind,
    )


def split_members(members: List[TeamMember]):
    """Return (roster, coach) for a team's membership rows."""
    roster = [member for member in members if not member.is_coach]
    coach = next((member for member in members if member.is_coach), None)
    return roster, coach


def to_read(
    team: Team, members: List[TeamMember], people: Dict[MemberRef, Person]
) -> TeamRead:
    """Convert a Team and its memberships to the TeamRead DTO.

    The coach is kept apart from the roster, and roster ids and counts only
    cover non-coach members.
    """
    roster, coach = split_members(members)

    return TeamRead(
        id=team.id,
        name=team.name,
        phone=team.phone,
        coach_label=team.coach,
        status=status_label(team.status),
        description=team.description,
        category=team.category,
        team_type=team.team_type,
        created_at=team.created_on,
        updated_at=team.updated_on,
        roster=[to_member_display(member, people.get(member.ref)) for member in roster],
        athlete_ids=[member.ref.person_id for member in roster],
        athlete_count=len(roster),
        coach=to_member_display(coach, people.get(coach.ref)) if coach else None,
    )


def member_refs(members: List[TeamMember]) -> List[MemberRef]:
    return [member.ref for member in members]
