from typing import Optional
from sqlmodel import Field
from .common import TimestampMixin, PersonStatus, TemporaryPersonType


class Athlete(TimestampMixin, table=True):
    __tablename__ = "athletes"

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(nullable=False)
    last_name: str = Field(nullable=False)
    identification: Optional[str] = Field(default=None, index=True)
    # Sports category of the athlete's active inscription, e.g. "Sub-15"
    category: Optional[str] = Field(default=None)
    status: PersonStatus = Field(default=PersonStatus.active, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Employee(TimestampMixin, table=True):
    __tablename__ = "employees"

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(nullable=False)
    last_name: str = Field(nullable=False)
    identification: Optional[str] = Field(default=None, index=True)
    position: Optional[str] = Field(default=None)
    status: PersonStatus = Field(default=PersonStatus.active, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class TemporaryPerson(TimestampMixin, table=True):
    __tablename__ = "temporary_persons"

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(nullable=False)
    last_name: str = Field(nullable=False)
    identification: Optional[str] = Field(default=None, index=True)
    person_type: TemporaryPersonType = Field(
        default=TemporaryPersonType.athlete, nullable=False
    )
    status: PersonStatus = Field(default=PersonStatus.active, nullable=False)
    # Denormalized labels of the team the person currently plays for
    category: Optional[str] = Field(default=None)
    team: Optional[str] = Field(default=None)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
