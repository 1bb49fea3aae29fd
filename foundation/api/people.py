from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session

from foundation.api.deps import get_db_session
from foundation.mappers.people import (
    athlete_candidate,
    coach_candidate,
    temporary_candidate,
)
from foundation.models.common import TemporaryPersonType
from foundation.repos.people_repo import PeopleRepo
from foundation.schemas.people import Candidate

router = APIRouter(prefix="/api/v1", tags=["People"])


@router.get("/athletes", response_model=List[Candidate])
async def list_assignable_athletes(
    session: Session = Depends(get_db_session),
) -> List[Candidate]:
    """Active foundation athletes followed by active temporary athletes."""
    repo = PeopleRepo()
    foundation = [athlete_candidate(a) for a in repo.list_active_athletes(session)]
    temporary = [
        temporary_candidate(p, "Temporary athletes")
        for p in repo.list_active_temporary(session, TemporaryPersonType.athlete)
    ]
    return foundation + temporary


@router.get("/trainers", response_model=List[Candidate])
async def list_assignable_trainers(
    session: Session = Depends(get_db_session),
) -> List[Candidate]:
    """Active employees holding a coaching position, then active temporary coaches."""
    repo = PeopleRepo()
    foundation = [coach_candidate(e) for e in repo.list_active_coaches(session)]
    temporary = [
        temporary_candidate(p, "Temporary coaches")
        for p in repo.list_active_temporary(session, TemporaryPersonType.coach)
    ]
    return foundation + temporary
