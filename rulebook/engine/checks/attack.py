from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...config import RuleVariants
    from ...models.checks import Combatant, Move, TargetSelection
    from ..systems.dice import DieRoller
    from .review import CheckReviewer

from ...models.checks import CheckOutcome, TargetResult
from ...models.enums import Condition, Fortune
from ...models.modifiers import ALWAYS_HITS, Modifier
from ..systems.effects import confusion_check
from ..systems.evasion import resolve_target_dc
from .base import DiceCheck
from .contexts import context_for, resolve_contexts
from .gates import Gate, disability_gate, no_target_gate, range_gate


class AttackCheck(DiceCheck):
    kind = "attack"

    def __init__(
        self,
        source: Combatant,
        move: Move,
        targets: list[TargetSelection],
        variants: RuleVariants,
        *,
        roller: DieRoller,
        reviewer: CheckReviewer | None = None,
        fortune: Fortune = Fortune.NONE,
    ) -> None:
        super().__init__(source, variants, roller=roller, reviewer=reviewer, fortune=fortune)
        self.move = move
        self.selections = list(targets)

    @property
    def action_slug(self) -> str:
        return self.move.slug

    @property
    def label(self) -> str:
        return f"{self.move.name} Attack Roll"

    @property
    def domains(self) -> tuple[str, ...]:
        return ("attack", f"{self.move.slug}-attack")

    @property
    def is_self_attack(self) -> bool:
        return self.move.is_self

    async def prepare_contexts(self) -> None:
        self.contexts = resolve_contexts(
            self.source, self.selections, self_only=self.is_self_attack
        )

    def gate_checks(self) -> Gate | None:
        return (
            no_target_gate(self.contexts, self.variants)
            or range_gate(self.contexts, self.move, self.variants, self.is_self_attack)
            or disability_gate(self.source, self.move)
        )

    def prepare_modifiers(self) -> None:
        super().prepare_modifiers()
        cost = self.move.accuracy_cost
        accuracy = Modifier(
            "accuracy-check",
            "Accuracy Check",
            ALWAYS_HITS if cost == ALWAYS_HITS else -cost,
        )
        modifiers = [accuracy, *self.modifiers]
        if self.source.accuracy_bonus != 0:
            modifiers.append(
                Modifier("accuracy-bonus", "Accuracy Bonus", self.source.accuracy_bonus)
            )
        self.modifiers = modifiers

    async def execute(self) -> CheckOutcome:
        contexts = self.contexts or [context_for(self.source)]
        for ctx in contexts:
            ctx.dc = resolve_target_dc(ctx, self.move, self.source.crit_range)

        roll = await self.draw()
        results = [
            TargetResult(
                target_id=ctx.dc.target_id,
                dc_slug=ctx.dc.slug,
                threshold=ctx.dc.value,
                crit_range=ctx.dc.crit_range,
                hit=ctx.dc.auto_hit or roll.total >= ctx.dc.value,
                critical=roll.die in ctx.dc.crit_range,
            )
            for ctx in contexts
        ]
        return self._outcome(roll, targets=results)

    async def after_roll(self, outcome: CheckOutcome) -> None:
        if "condition:" + Condition.CONFUSED.value in self.options:
            self.effects.append(await confusion_check(self.roller))
