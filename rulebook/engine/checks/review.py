from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel, Field

from ...models.enums import Fortune
from ...models.modifiers import Modifier, Number, Statistic


class ReviewRequest(BaseModel):
    """What the pipeline hands over while it waits for the user.

    The statistic belongs to the suspended check, so anything toggled or added
    here dies with that check.
    """

    title: str
    statistic: Statistic
    options: set[str] = Field(default_factory=set)
    fortune: Fortune = Fortune.NONE

    def substitute(self, slug: str, active: bool = True) -> None:
        option = f"substitute:{slug}"
        if active:
            self.options.add(option)
        else:
            self.options.discard(option)

    def add_modifier(self, label: str, value: Number) -> int:
        return self.statistic.push(Modifier.from_label(label or "Unnamed Modifier", value))


class ReviewResult(BaseModel):
    fortune: Fortune = Fortune.NONE


class CheckReviewer(Protocol):
    async def review(self, request: ReviewRequest) -> ReviewResult | None:
        """Return None to cancel the check."""
        ...


class AutoConfirm:
    async def review(self, request: ReviewRequest) -> ReviewResult | None:
        return ReviewResult(fortune=request.fortune)
