import math
from contextlib import contextmanager
from typing import List, Optional, Sequence
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from foundation.errors import (
    ConflictError,
    DuplicateNameError,
    EmptyRosterError,
    NotFoundError,
    PersistenceError,
    TeamError,
    ValidationError,
)
from foundation.logging import get_logger
from foundation.mappers.teams import member_refs, split_members, to_read
from foundation.models.common import (
    MemberRole,
    TeamStatus,
    TeamType,
    collapse_spaces,
    member_kind_for,
    normalize_team_type,
    utc_now,
)
from foundation.models.team import MemberRef, Team
from foundation.repos.teams_repo import TeamsRepo
from foundation.schemas.teams import (
    DeleteResult,
    MemberRefIn,
    NameAvailability,
    Pagination,
    RosterEntryIn,
    TeamCreate,
    TeamPage,
    TeamRead,
    TeamStats,
    TeamUpdate,
)
from foundation.services.membership import (
    find_conflicting_memberships,
    validate_composition,
)

logger = get_logger(__name__)

# Scalar Team columns a TeamUpdate may overwrite, keyed by payload field
_SCALAR_FIELDS = {
    "coach_label": "coach",
    "category": "category",
    "phone": "phone",
    "description": "description",
}


def _ref_for(person_id: int, type_hint: Optional[str], team_type: TeamType, role: MemberRole) -> MemberRef:
    if person_id is None or person_id <= 0:
        raise ValidationError(f"Invalid ID: {person_id}")
    kind_source = team_type
    if type_hint:
        try:
            kind_source = normalize_team_type(type_hint)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
    return MemberRef(member_kind_for(kind_source, role), person_id)


def resolve_roster(entries: Sequence[RosterEntryIn], team_type: TeamType) -> List[MemberRef]:
    """Turn roster entries (bare ids or {id, type}) into unique MemberRefs.

    Bare ids take the person kind the team type expects.
    """
    refs: List[MemberRef] = []
    for entry in entries:
        if isinstance(entry, MemberRefIn):
            ref = _ref_for(entry.id, entry.type, team_type, MemberRole.member)
        else:
            ref = _ref_for(entry, None, team_type, MemberRole.member)
        if ref not in refs:
            refs.append(ref)
    return refs


def resolve_coach(coach: Optional[MemberRefIn], team_type: TeamType) -> Optional[MemberRef]:
    if coach is None:
        return None
    return _ref_for(coach.id, coach.type, team_type, MemberRole.coach)


def _person_name(people, ref: MemberRef) -> str:
    person = people.get(ref)
    return person.full_name if person is not None else f"#{ref.person_id}"


def _temporary_ids(refs: Sequence[MemberRef]) -> List[int]:
    ids = []
    for ref in refs:
        if ref.is_temporary and ref.person_id not in ids:
            ids.append(ref.person_id)
    return ids


class TeamService:
    """Creates, updates and removes teams together with their rosters.

    Validation, uniqueness checks, membership rows and the team/category labels
    written back onto temporary persons all run inside one session transaction:
    either everything commits or nothing does.
    """

    def __init__(self, session: Session, repo: Optional[TeamsRepo] = None):
        self.session = session
        self.repo = repo or TeamsRepo()

    @contextmanager
    def _transaction(self, action: str):
        try:
            yield
            self.session.commit()
        except TeamError:
            self.session.rollback()
            raise
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("team_write_failed", action=action, error=str(exc))
            raise PersistenceError(f"Could not {action} the team: {exc}") from exc

    # Reads

    def _read(self, team: Team) -> TeamRead:
        members = self.repo.get_members(self.session, team.id)
        people = self.repo.get_people(self.session, member_refs(members))
        return to_read(team, members, people)

    def _require(self, team_id: int) -> Team:
        team = self.repo.get(self.session, team_id)
        if team is None:
            raise NotFoundError(f"No team found with ID {team_id}.")
        return team

    def get_team(self, team_id: int) -> TeamRead:
        return self._read(self._require(team_id))

    def list_teams(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        status: Optional[TeamStatus] = None,
        team_type: Optional[TeamType] = None,
    ) -> TeamPage:
        teams, total = self.repo.list(
            self.session,
            page=page,
            limit=limit,
            search=search,
            status=status,
            team_type=team_type,
        )
        members_by_team = self.repo.get_members_by_team(
            self.session, [team.id for team in teams]
        )
        all_members = [m for members in members_by_team.values() for m in members]
        people = self.repo.get_people(self.session, member_refs(all_members))

        total_pages = math.ceil(total / limit) if limit else 0
        return TeamPage(
            data=[to_read(team, members_by_team[team.id], people) for team in teams],
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                total_pages=total_pages,
                has_next=page < total_pages,
                has_prev=page > 1,
            ),
        )

    def check_name_availability(
        self, name: str, exclude_id: Optional[int] = None
    ) -> NameAvailability:
        if self.repo.get_by_name(self.session, name, exclude_id) is None:
            return NameAvailability(available=True, message="Name available")
        return NameAvailability(
            available=False, message=f'The name "{collapse_spaces(name)}" is already registered.'
        )

    def get_stats(self) -> TeamStats:
        by_status = self.repo.count_by_status(self.session)
        by_type = self.repo.count_by_type(self.session)
        return TeamStats(
            total=by_status["total"],
            active=by_status["active"],
            inactive=by_status["inactive"],
            foundation=by_type[TeamType.foundation],
            temporary=by_type[TeamType.temporary],
        )

    # Writes

    def _write_labels(self, team: Team, refs: Sequence[MemberRef]) -> None:
        person_ids = _temporary_ids(refs)
        if not person_ids:
            return
        self.repo.update_person_labels(self.session, person_ids, team.category, team.name)
        logger.info(
            "temporary_person_labels_written",
            team_id=team.id,
            person_ids=person_ids,
            category=team.category,
            team_name=team.name,
        )

    def _clear_labels(self, team_id: int, person_ids: Sequence[int]) -> None:
        if not person_ids:
            return
        self.repo.clear_person_labels(self.session, person_ids)
        logger.info(
            "temporary_person_labels_cleared", team_id=team_id, person_ids=list(person_ids)
        )

    def _recheck_exclusivity(self, team: Team) -> None:
        # Another request may have committed an assignment after validation ran
        if team.status != TeamStatus.active or team.team_type != TeamType.temporary:
            return
        conflicts = find_conflicting_memberships(self.session, team.id, self.repo)
        if conflicts:
            logger.warning(
                "team_membership_conflict_detected",
                team_id=team.id,
                person_ids=[ref.person_id for ref, _ in conflicts],
            )
            people = self.repo.get_people(self.session, [ref for ref, _ in conflicts])
            raise ConflictError(
                ". ".join(
                    f'The temporary person {_person_name(people, ref)} already '
                    f'belongs to the active team "{other.name}"'
                    for ref, other in conflicts
                )
            )

    def create_team(self, data: TeamCreate) -> TeamRead:
        team_type = data.team_type

        if self.repo.get_by_name(self.session, data.name) is not None:
            raise DuplicateNameError(f'The team "{data.name}" is already registered.')

        roster = resolve_roster(data.athletes or [], team_type)
        if not roster:
            raise EmptyRosterError()
        coach = resolve_coach(data.coach, team_type)

        validate_composition(self.session, team_type, roster, coach, repo=self.repo)

        team = Team(
            name=data.name,
            coach=data.coach_label,
            category=data.category,
            phone=data.phone,
            description=data.description,
            status=data.status,
            team_type=team_type,
        )
        with self._transaction("create"):
            self.repo.create_with_members(self.session, team, roster, coach)
            if team_type == TeamType.temporary:
                self._write_labels(team, roster + ([coach] if coach else []))
            self._recheck_exclusivity(team)

        logger.info(
            "team_created",
            team_id=team.id,
            team_type=team_type.value,
            members=len(roster),
            has_coach=coach is not None,
        )
        return self._read(team)

    def update_team(self, team_id: int, data: TeamUpdate) -> TeamRead:
        team = self._require(team_id)
        fields_set = data.model_fields_set

        if data.name is not None:
            if self.repo.get_by_name(self.session, data.name, exclude_id=team_id):
                raise DuplicateNameError(
                    f'The name "{data.name}" is already registered by another team.'
                )

        new_type = data.team_type or team.team_type
        type_changed = new_type != team.team_type

        current_members = self.repo.get_members(self.session, team_id)
        current_roster, current_coach = split_members(current_members)

        if "athletes" in fields_set:
            roster = resolve_roster(data.athletes or [], new_type)
            if not roster:
                raise EmptyRosterError()
        elif type_changed:
            raise ValidationError("A roster is required when changing the team type.")
        else:
            roster = member_refs(current_roster)

        if "coach" in fields_set:
            coach = resolve_coach(data.coach, new_type)
        elif type_changed and current_coach is not None:
            raise ValidationError(
                "The coach must be sent again (entrenadorData) or removed with null "
                "when changing the team type."
            )
        else:
            coach = current_coach.ref if current_coach else None

        membership_changed = type_changed or bool({"athletes", "coach"} & fields_set)
        if membership_changed:
            validate_composition(
                self.session, new_type, roster, coach, exclude_team_id=team_id, repo=self.repo
            )

        old_temporary = _temporary_ids(member_refs(current_members))
        new_refs = roster + ([coach] if coach else [])
        new_temporary = _temporary_ids(new_refs) if new_type == TeamType.temporary else []

        with self._transaction("update"):
            if data.name is not None:
                team.name = data.name
            if data.status is not None:
                team.status = data.status
            for field, column in _SCALAR_FIELDS.items():
                if field in fields_set:
                    setattr(team, column, getattr(data, field))
            team.team_type = new_type
            self.repo.save(self.session, team)

            removed = [pid for pid in old_temporary if pid not in new_temporary]
            self._clear_labels(team_id, removed)
            if new_type == TeamType.temporary:
                self._write_labels(team, new_refs)

            if membership_changed:
                joined_at = {member.ref: member.joined_at for member in current_members}
                self.repo.replace_members(
                    self.session, team_id, roster, coach, joined_at=joined_at
                )
            self._recheck_exclusivity(team)

        logger.info(
            "team_updated",
            team_id=team_id,
            fields=sorted(fields_set),
            membership_changed=membership_changed,
        )
        return self._read(team)

    def delete_team(self, team_id: int) -> DeleteResult:
        """Soft delete: drop memberships, release temporary persons, mark inactive."""
        team = self._require(team_id)
        members = self.repo.get_members(self.session, team_id)
        temporary_ids = _temporary_ids(member_refs(members))

        with self._transaction("delete"):
            self.repo.delete_members(self.session, team_id)
            if team.team_type == TeamType.temporary:
                self._clear_labels(team_id, temporary_ids)
            team.status = TeamStatus.inactive
            team.deleted_at = utc_now()
            self.repo.save(self.session, team)

        logger.info("team_deleted", team_id=team_id, released=len(temporary_ids))
        return DeleteResult(message=f'Team "{team.name}" deleted successfully.')

    def change_status(self, team_id: int, status: TeamStatus) -> TeamRead:
        team = self._require(team_id)
        previous = team.status

        with self._transaction("change the status of"):
            team.status = status
            self.repo.save(self.session, team)
            if previous != TeamStatus.active:
                # Reactivating must not leave a temporary person on two active teams
                self._recheck_exclusivity(team)

        logger.info(
            "team_status_changed",
            team_id=team_id,
            previous=previous.value,
            status=status.value,
        )
        return self._read(team)

