from .teams_repo import TeamsRepo
from .people_repo import PeopleRepo

__all__ = [
    "TeamsRepo",
    "PeopleRepo",
]
