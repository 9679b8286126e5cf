from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...config import RuleVariants
    from ...models.checks import Combatant
    from ..systems.dice import DieRoller
    from .review import CheckReviewer

from ...models.checks import CheckOutcome
from ...models.enums import Fortune
from .base import DiceCheck


class SaveCheck(DiceCheck):
    """Untargeted d20 + save modifiers, optionally against a fixed DC."""

    kind = "save-check"

    def __init__(
        self,
        source: Combatant,
        variants: RuleVariants,
        *,
        roller: DieRoller,
        dc: int | None = None,
        reviewer: CheckReviewer | None = None,
        fortune: Fortune = Fortune.NONE,
    ) -> None:
        super().__init__(source, variants, roller=roller, reviewer=reviewer, fortune=fortune)
        self.dc = dc

    @property
    def label(self) -> str:
        return "Save Check"

    async def execute(self) -> CheckOutcome:
        roll = await self.draw()
        success = None if self.dc is None else roll.total >= self.dc
        return self._outcome(roll, dc=self.dc, success=success)
