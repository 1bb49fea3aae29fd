from fastapi import Depends
from sqlmodel import Session

from foundation.database import engine
from foundation.repos.teams_repo import TeamsRepo
from foundation.services.teams import TeamService


def get_db_session() -> Session:
    with Session(engine) as session:
        yield session


def get_teams_repo() -> TeamsRepo:
    return TeamsRepo()


def get_team_service(
    session: Session = Depends(get_db_session),
    repo: TeamsRepo = Depends(get_teams_repo),
) -> TeamService:
    return TeamService(session, repo)
