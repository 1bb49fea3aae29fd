from typing import List
from sqlmodel import Session, select

from foundation.models.people import Athlete, Employee, TemporaryPerson
from foundation.models.common import PersonStatus, TemporaryPersonType

# Employee positions that make someone eligible for a coach slot
COACH_POSITION_KEYWORDS = ("coach", "trainer", "entrenador")


class PeopleRepo:
    def list_active_athletes(self, session: Session) -> List[Athlete]:
        statement = (
            select(Athlete)
            .where(Athlete.status == PersonStatus.active)
            .order_by(Athlete.last_name, Athlete.first_name)
        )
        return list(session.exec(statement).all())

    def list_active_coaches(self, session: Session) -> List[Employee]:
        statement = (
            select(Employee)
            .where(Employee.status == PersonStatus.active)
            .order_by(Employee.last_name, Employee.first_name)
        )
        return [
            employee
            for employee in session.exec(statement).all()
            if employee.position
            and any(word in employee.position.lower() for word in COACH_POSITION_KEYWORDS)
        ]

    def list_active_temporary(
        self, session: Session, person_type: TemporaryPersonType
    ) -> List[TemporaryPerson]:
        statement = (
            select(TemporaryPerson)
            .where(
                TemporaryPerson.status == PersonStatus.active,
                TemporaryPerson.person_type == person_type,
            )
            .order_by(TemporaryPerson.last_name, TemporaryPerson.first_name)
        )
        return list(session.exec(statement).all())
