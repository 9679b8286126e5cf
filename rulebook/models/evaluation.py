from pydantic import BaseModel, Field


class StatTerm(BaseModel):
    key: int
    slug: str
    label: str
    value: float
    counted: bool
    note: str | None = None


class StatBreakdown(BaseModel):
    slug: str
    label: str
    terms: list[StatTerm] = Field(default_factory=list)
    result: float
