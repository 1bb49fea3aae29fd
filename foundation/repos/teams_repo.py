from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple, Union
from sqlmodel import Session, select, func
from sqlalchemy import or_

from foundation.models.team import Team, TeamMember, MemberRef
from foundation.models.people import Athlete, Employee, TemporaryPerson
from foundation.models.common import (
    MemberKind,
    MemberRole,
    TeamStatus,
    TeamType,
    collapse_spaces,
)

Person = Union[Athlete, Employee, TemporaryPerson]

PERSON_MODELS = {
    MemberKind.athlete: Athlete,
    MemberKind.employee: Employee,
    MemberKind.temporary_person: TemporaryPerson,
}


def _escape_like(text: str) -> str:
    # Search text is matched literally, so LIKE wildcards are escaped
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class TeamsRepo:
    """Data access for teams, their memberships and the people they reference.

    Write methods only flush; the caller owns the transaction and decides
    when to commit or roll back.
    """

    def get(
        self, session: Session, team_id: int, *, include_deleted: bool = False
    ) -> Optional[Team]:
        team = session.get(Team, team_id)
        if team is None or (team.is_deleted and not include_deleted):
            return None
        return team

    def get_by_name(
        self, session: Session, name: str, exclude_id: Optional[int] = None
    ) -> Optional[Team]:
        statement = select(Team).where(
            func.lower(Team.name) == collapse_spaces(name).lower(),
            Team.deleted_at.is_(None),
        )
        if exclude_id is not None:
            statement = statement.where(Team.id != exclude_id)
        return session.exec(statement).first()

    def list(
        self,
        session: Session,
        *,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        status: Optional[TeamStatus] = None,
        team_type: Optional[TeamType] = None,
    ) -> Tuple[List[Team], int]:
        filters = [Team.deleted_at.is_(None)]
        if search:
            pattern = f"%{_escape_like(search.strip())}%"
            filters.append(
                or_(
                    Team.name.ilike(pattern, escape="\\"),
                    Team.coach.ilike(pattern, escape="\\"),
                    Team.category.ilike(pattern, escape="\\"),
                )
            )
        if status is not None:
            filters.append(Team.status == status)
        if team_type is not None:
            filters.append(Team.team_type == team_type)

        total = session.exec(select(func.count(Team.id)).where(*filters)).one()
        statement = (
            select(Team)
            .where(*filters)
            .order_by(Team.created_on.desc(), Team.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(session.exec(statement).all()), total

    def create_with_members(
        self,
        session: Session,
        team: Team,
        roster: Iterable[MemberRef],
        coach: Optional[MemberRef] = None,
    ) -> Team:
        session.add(team)
        session.flush()
        self._add_members(session, team.id, roster, coach)
        session.flush()
        return team

    def save(self, session: Session, team: Team) -> Team:
        session.add(team)
        session.flush()
        return team

    def get_members(self, session: Session, team_id: int) -> List[TeamMember]:
        statement = (
            select(TeamMember)
            .where(TeamMember.team_id == team_id)
            .order_by(TeamMember.id)
        )
        return list(session.exec(statement).all())

    def get_members_by_team(
        self, session: Session, team_ids: List[int]
    ) -> Dict[int, List[TeamMember]]:
        members: Dict[int, List[TeamMember]] = {team_id: [] for team_id in team_ids}
        if not team_ids:
            return members
        statement = (
            select(TeamMember)
            .where(TeamMember.team_id.in_(team_ids))
            .order_by(TeamMember.id)
        )
        for member in session.exec(statement).all():
            members[member.team_id].append(member)
        return members

    def replace_members(
        self,
        session: Session,
        team_id: int,
        roster: Iterable[MemberRef],
        coach: Optional[MemberRef] = None,
        joined_at: Optional[Dict[MemberRef, datetime]] = None,
    ) -> None:
        self.delete_members(session, team_id)
        self._add_members(session, team_id, roster, coach, joined_at)
        session.flush()

    def delete_members(self, session: Session, team_id: int) -> int:
        members = self.get_members(session, team_id)
        for member in members:
            session.delete(member)
        session.flush()
        return len(members)

    def _add_members(
        self,
        session: Session,
        team_id: int,
        roster: Iterable[MemberRef],
        coach: Optional[MemberRef],
        joined_at: Optional[Dict[MemberRef, datetime]] = None,
    ) -> None:
        joined_at = joined_at or {}
        for ref in roster:
            session.add(
                TeamMember.for_ref(
                    team_id, ref, MemberRole.member, joined_at=joined_at.get(ref)
                )
            )
        if coach is not None:
            session.add(
                TeamMember.for_ref(
                    team_id, coach, MemberRole.coach, joined_at=joined_at.get(coach)
                )
            )

    def find_person(self, session: Session, ref: MemberRef) -> Optional[Person]:
        return session.get(PERSON_MODELS[ref.kind], ref.person_id)

    def get_people(
        self, session: Session, refs: Iterable[MemberRef]
    ) -> Dict[MemberRef, Person]:
        ids_by_kind: Dict[MemberKind, set] = {}
        for ref in refs:
            ids_by_kind.setdefault(ref.kind, set()).add(ref.person_id)

        people: Dict[MemberRef, Person] = {}
        for kind, ids in ids_by_kind.items():
            model = PERSON_MODELS[kind]
            for person in session.exec(select(model).where(model.id.in_(ids))).all():
                people[MemberRef(kind, person.id)] = person
        return people

    def update_person_labels(
        self,
        session: Session,
        person_ids: Iterable[int],
        category: Optional[str],
        team_name: Optional[str],
    ) -> List[TemporaryPerson]:
        updated = []
        for person_id in person_ids:
            person = session.get(TemporaryPerson, person_id)
            if person is None:
                continue
            person.category = category or None
            person.team = team_name or None
            session.add(person)
            updated.append(person)
        session.flush()
        return updated

    def clear_person_labels(
        self, session: Session, person_ids: Iterable[int]
    ) -> List[TemporaryPerson]:
        return self.update_person_labels(session, person_ids, None, None)

    def find_active_memberships(
        self,
        session: Session,
        temporary_person_id: int,
        exclude_team_id: Optional[int] = None,
    ) -> List[Tuple[TeamMember, Team]]:
        """Active memberships of a temporary person in active, non-deleted teams."""
        statement = (
            select(TeamMember, Team)
            .join(Team, Team.id == TeamMember.team_id)
            .where(
                TeamMember.temporary_person_id == temporary_person_id,
                TeamMember.is_active == True,  # noqa: E712
                Team.status == TeamStatus.active,
                Team.deleted_at.is_(None),
            )
            .order_by(Team.id)
        )
        if exclude_team_id is not None:
            statement = statement.where(Team.id != exclude_team_id)
        return list(session.exec(statement).all())

    def count_by_status(self, session: Session) -> Dict[str, int]:
        total = session.exec(select(func.count(Team.id))).one()
        active = session.exec(
            select(func.count(Team.id)).where(
                Team.status == TeamStatus.active, Team.deleted_at.is_(None)
            )
        ).one()
        inactive = session.exec(
            select(func.count(Team.id)).where(Team.status == TeamStatus.inactive)
        ).one()
        return {"total": total, "active": active, "inactive": inactive}

    def count_by_type(self, session: Session) -> Dict[TeamType, int]:
        statement = select(Team.team_type, func.count(Team.id)).group_by(Team.team_type)
        counts = {team_type: 0 for team_type in TeamType}
        for team_type, count in session.exec(statement).all():
            counts[TeamType(team_type)] = count
        return counts
