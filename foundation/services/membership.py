from typing import List, Optional, Sequence, Tuple
from sqlmodel import Session

from foundation.errors import ConflictError, ValidationError
from foundation.models.common import (
    MemberKind,
    MemberRole,
    PersonStatus,
    TeamType,
    member_kind_for,
)
from foundation.models.team import MemberRef, Team
from foundation.repos.teams_repo import TeamsRepo

KIND_LABELS = {
    MemberKind.athlete: "athlete",
    MemberKind.employee: "employee",
    MemberKind.temporary_person: "temporary person",
}

TEAM_TYPE_LABELS = {
    TeamType.foundation: "foundation",
    TeamType.temporary: "temporary",
}


def _with_article(label: str) -> str:
    return f"an {label}" if label[0] in "aeiou" else f"a {label}"


def validate_members_exist(
    session: Session, refs: Sequence[MemberRef], repo: Optional[TeamsRepo] = None
) -> None:
    """Every referenced person must exist and be active.

    All problems are collected and reported together.
    """
    repo = repo or TeamsRepo()
    errors = []

    for ref in refs:
        label = KIND_LABELS[ref.kind]
        person = repo.find_person(session, ref)
        if person is None:
            errors.append(f"The {label} with ID {ref.person_id} does not exist")
        elif person.status != PersonStatus.active:
            errors.append(f"The {label} {person.full_name} is not active")

    if errors:
        raise ValidationError(". ".join(errors))


def _conflicts_for(
    session: Session,
    ref: MemberRef,
    exclude_team_id: Optional[int],
    repo: TeamsRepo,
    label: str,
) -> List[str]:
    memberships = repo.find_active_memberships(session, ref.person_id, exclude_team_id)
    if not memberships:
        return []
    person = repo.find_person(session, ref)
    name = person.full_name if person is not None else f"#{ref.person_id}"
    return [
        f'The {label} {name} already belongs to the active team "{team.name}"'
        for _, team in memberships
    ]


def validate_exclusivity(
    session: Session,
    refs: Sequence[MemberRef],
    team_type: TeamType,
    exclude_team_id: Optional[int] = None,
    repo: Optional[TeamsRepo] = None,
) -> None:
    """A temporary person may hold at most one active membership in an active team.

    Foundation athletes and employees are free to sit on several teams, so
    only temporary persons are checked.
    """
    if team_type != TeamType.temporary:
        return
    repo = repo or TeamsRepo()

    errors = []
    for ref in refs:
        if ref.is_temporary:
            errors.extend(
                _conflicts_for(session, ref, exclude_team_id, repo, "temporary person")
            )

    if errors:
        raise ConflictError(". ".join(errors))


def validate_coach_exclusivity(
    session: Session,
    coach: Optional[MemberRef],
    team_type: TeamType,
    exclude_team_id: Optional[int] = None,
    repo: Optional[TeamsRepo] = None,
) -> None:
    if coach is None or team_type != TeamType.temporary or not coach.is_temporary:
        return
    repo = repo or TeamsRepo()

    errors = _conflicts_for(session, coach, exclude_team_id, repo, "temporary coach")
    if errors:
        raise ConflictError(". ".join(errors))


def validate_homogeneity(
    session: Session,
    roster: Sequence[MemberRef],
    team_type: TeamType,
    coach: Optional[MemberRef] = None,
    repo: Optional[TeamsRepo] = None,
) -> None:
    """Roster members share one person kind, matching the team type.

    Foundation rosters must also share a single sports category.
    """
    repo = repo or TeamsRepo()
    team_label = TEAM_TYPE_LABELS[team_type]

    kinds = {ref.kind for ref in roster}
    if len(kinds) > 1:
        raise ValidationError(
            "A team cannot mix foundation athletes and temporary persons"
        )

    expected = member_kind_for(team_type, MemberRole.member)
    if kinds and kinds != {expected}:
        raise ValidationError(
            f"A {team_label} team only accepts {KIND_LABELS[expected]}s as members"
        )

    expected_coach = member_kind_for(team_type, MemberRole.coach)
    if coach is not None and coach.kind != expected_coach:
        raise ValidationError(
            f"The coach of a {team_label} team must be "
            f"{_with_article(KIND_LABELS[expected_coach])}"
        )

    if team_type == TeamType.foundation and roster:
        people = repo.get_people(session, roster)
        categories = {
            person.category or "No category" for person in people.values()
        }
        if len(categories) > 1:
            raise ValidationError(
                "All foundation athletes on a team must share the same sports "
                f"category (found: {', '.join(sorted(categories))})"
            )


def validate_composition(
    session: Session,
    team_type: TeamType,
    roster: Sequence[MemberRef],
    coach: Optional[MemberRef] = None,
    exclude_team_id: Optional[int] = None,
    repo: Optional[TeamsRepo] = None,
) -> None:
    """Run every membership check, stopping at the first failing category."""
    repo = repo or TeamsRepo()

    if coach is not None and coach in roster:
        raise ValidationError("The coach cannot also be listed as a team member")

    refs = list(roster)
    if coach is not None:
        refs.append(coach)

    validate_members_exist(session, refs, repo)
    validate_exclusivity(session, roster, team_type, exclude_team_id, repo)
    validate_coach_exclusivity(session, coach, team_type, exclude_team_id, repo)
    validate_homogeneity(session, roster, team_type, coach, repo)


def find_conflicting_memberships(
    session: Session, team_id: int, repo: Optional[TeamsRepo] = None
) -> List[Tuple[MemberRef, Team]]:
    """Temporary members of `team_id` that are also active in another active team."""
    repo = repo or TeamsRepo()

    conflicts = []
    for member in repo.get_members(session, team_id):
        if not member.is_active or member.member_kind != MemberKind.temporary_person:
            continue
        for _, team in repo.find_active_memberships(
            session, member.temporary_person_id, exclude_team_id=team_id
        ):
            conflicts.append((member.ref, team))
    return conflicts
