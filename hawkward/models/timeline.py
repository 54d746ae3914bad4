"""
Timeline models and balance projection.

A timeline sub-document stores a starting balance and one entry per
month. The running balance is never stored; it is derived on read.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MonthEntry(BaseModel):
    """One month of planned income and expenses."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str = Field(..., description="Year-month key, e.g. '2025-January'")
    year: int
    month: str
    income: float = 0.0
    expenses: float = 0.0
    is_locked: bool = False


class TimelineData(BaseModel):
    """Value stored under a timeline key."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    starting_balance: float = 0.0
    months: list[MonthEntry] = Field(default_factory=list)


class ProjectedMonth(MonthEntry):
    """A month with its derived running balance."""
    balance: float


class TimelineProjection(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    starting_balance: float
    months: list[ProjectedMonth]


def project_balances(raw: Any) -> TimelineProjection:
    """
    Compute the running balance for every month.

    balance[n] = startingBalance + sum(income[0..n] - expenses[0..n])

    Raises pydantic.ValidationError if ``raw`` is not a timeline sub-document.
    """
    timeline = TimelineData.model_validate(raw)

    running = timeline.starting_balance
    projected = []
    for entry in timeline.months:
        running = running + entry.income - entry.expenses
        fields = entry.model_dump()
        fields["balance"] = running
        projected.append(ProjectedMonth(**fields))

    return TimelineProjection(
        starting_balance=timeline.starting_balance,
        months=projected,
    )
