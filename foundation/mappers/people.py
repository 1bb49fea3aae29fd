from foundation.models.people import Athlete, Employee, TemporaryPerson
from foundation.schemas.people import Candidate


def athlete_candidate(athlete: Athlete) -> Candidate:
    return Candidate(
        id=athlete.id,
        name=athlete.full_name,
        identification=athlete.identification,
        category=athlete.category or "No category",
        source="fundacion",
        source_label="Foundation athletes",
        type="fundacion",
    )


def coach_candidate(employee: Employee) -> Candidate:
    return Candidate(
        id=employee.id,
        name=employee.full_name,
        identification=employee.identification,
        source="fundacion",
        source_label="Foundation coaches",
        type="fundacion",
    )


def temporary_candidate(person: TemporaryPerson, source_label: str) -> Candidate:
    # Temporary persons carry the category of their current team, if any
    return Candidate(
        id=person.id,
        name=person.full_name,
        identification=person.identification,
        category=person.category,
        source="temporal",
        source_label=source_label,
        type="temporal",
    )
