from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Candidate(BaseModel):
    """A person that can be picked for a roster or coach slot."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    identification: Optional[str] = None
    category: Optional[str] = Field(default=None, alias="categoria")
    source: str  # "fundacion" | "temporal"
    source_label: str = Field(alias="sourceLabel")
    type: str
