from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...config import RuleVariants
    from ...models.checks import Combatant, Move, TargetContext

from ...models.enums import AbortReason, ActionCategory, Condition, Frequency

Gate = tuple[AbortReason, str]

MESSAGES: dict[AbortReason, str] = {
    AbortReason.NO_TARGET: "Select at least one target before attacking.",
    AbortReason.OUT_OF_RANGE: "A selected target is out of the move's range.",
    AbortReason.CANNOT_ATTACK: "This combatant cannot attack right now.",
    AbortReason.FROZEN: "Frozen combatants cannot use moves.",
    AbortReason.SLEEPING: "Sleeping combatants cannot use moves.",
    AbortReason.RAGING: "Enraged combatants cannot use status moves.",
    AbortReason.DISABLED_MOVE: "This move is disabled.",
    AbortReason.SUPPRESSED: "Suppressed combatants may only use at-will moves.",
    AbortReason.CANCELLED: "The check was cancelled before rolling.",
}


def _fail(reason: AbortReason) -> Gate:
    return reason, MESSAGES[reason]


def no_target_gate(contexts: list[TargetContext], variants: RuleVariants) -> Gate | None:
    if variants.fail_attack_if_no_target and not contexts:
        return _fail(AbortReason.NO_TARGET)
    return None


def range_gate(
    contexts: list[TargetContext], move: Move, variants: RuleVariants, self_only: bool
) -> Gate | None:
    if self_only or not variants.fail_attack_if_out_of_range:
        return None
    reach = move.effective_range
    for ctx in contexts:
        if ctx.distance is None:
            continue
        if ctx.distance > reach:
            return _fail(AbortReason.OUT_OF_RANGE)
    return None


def disability_gate(source: Combatant, move: Move) -> Gate | None:
    if source.has(Condition.CANNOT_ATTACK):
        return _fail(AbortReason.CANNOT_ATTACK)
    if source.has(Condition.FROZEN):
        return _fail(AbortReason.FROZEN)
    if source.has(Condition.SLEEP):
        return _fail(AbortReason.SLEEPING)
    if source.has(Condition.RAGE) and move.category == ActionCategory.STATUS:
        return _fail(AbortReason.RAGING)
    if move.slug in source.disabled_moves:
        return _fail(AbortReason.DISABLED_MOVE)
    if source.has(Condition.SUPPRESSED) and move.frequency != Frequency.AT_WILL:
        return _fail(AbortReason.SUPPRESSED)
    return None
