from typing import Optional
from fastapi import APIRouter, Depends, Path, Query

from foundation.api.deps import get_team_service
from foundation.errors import ValidationError
from foundation.models.common import normalize_status, normalize_team_type
from foundation.schemas.teams import (
    DeleteResult,
    NameAvailability,
    StatusChange,
    TeamCreate,
    TeamPage,
    TeamRead,
    TeamStats,
    TeamUpdate,
)
from foundation.services.teams import TeamService

router = APIRouter(prefix="/api/v1/teams", tags=["Teams"])


def _normalized(normalizer, value: Optional[str]):
    if not value:
        return None
    try:
        return normalizer(value)
    except ValueError as e:
        raise ValidationError(str(e))


@router.get("", response_model=TeamPage)
async def list_teams(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    status: Optional[str] = Query(None),
    team_type: Optional[str] = Query(None, alias="teamType"),
    service: TeamService = Depends(get_team_service),
) -> TeamPage:
    """List non-deleted teams, newest first. Search matches name, coach and category."""
    return service.list_teams(
        page=page,
        limit=limit,
        search=search.strip() if search else None,
        status=_normalized(normalize_status, status),
        team_type=_normalized(normalize_team_type, team_type),
    )


@router.get("/check-name", response_model=NameAvailability)
async def check_name_availability(
    name: str = Query(..., min_length=3, max_length=100),
    exclude_id: Optional[int] = Query(None, alias="excludeId", ge=1),
    service: TeamService = Depends(get_team_service),
) -> NameAvailability:
    return service.check_name_availability(name, exclude_id)


@router.get("/stats", response_model=TeamStats)
async def get_team_stats(
    service: TeamService = Depends(get_team_service),
) -> TeamStats:
    return service.get_stats()


@router.get("/{team_id}", response_model=TeamRead)
async def get_team(
    team_id: int = Path(..., ge=1),
    service: TeamService = Depends(get_team_service),
) -> TeamRead:
    return service.get_team(team_id)


@router.post("", response_model=TeamRead, status_code=201)
async def create_team(
    team_data: TeamCreate,
    service: TeamService = Depends(get_team_service),
) -> TeamRead:
    """Create a team with its roster and optional coach in one transaction."""
    return service.create_team(team_data)


@router.put("/{team_id}", response_model=TeamRead)
async def update_team(
    team_data: TeamUpdate,
    team_id: int = Path(..., ge=1),
    service: TeamService = Depends(get_team_service),
) -> TeamRead:
    """Update a team. A supplied roster replaces the current one and must not be empty."""
    return service.update_team(team_id, team_data)


@router.patch("/{team_id}/status", response_model=TeamRead)
async def change_team_status(
    status_data: StatusChange,
    team_id: int = Path(..., ge=1),
    service: TeamService = Depends(get_team_service),
) -> TeamRead:
    return service.change_status(team_id, status_data.status)


@router.delete("/{team_id}", response_model=DeleteResult)
async def delete_team(
    team_id: int = Path(..., ge=1),
    service: TeamService = Depends(get_team_service),
) -> DeleteResult:
    """Soft delete: the team is kept as inactive and its temporary persons are released."""
    return service.delete_team(team_id)
