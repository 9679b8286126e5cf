from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...models.character import StatLine
    from ...models.checks import Move, TargetContext
    from ...models.modifiers import StagedModifierGroup

from ...core.primitives import clamp
from ...models.character import Evasion
from ...models.checks import CritRange, TargetDC
from ...models.enums import ActionCategory, Condition, EvasionKind, StatName

DICE_SIZE = 20
STAT_EVASION_CAP = 6
EVASION_CAP = 9
# Types that slip restraints: a stuck target still uses its normal evasion
STUCK_EXEMPT_TYPES = frozenset({"ghost"})
_STUCK = f"target:condition:{Condition.STUCK.value}"
_VULNERABLE = f"target:condition:{Condition.VULNERABLE.value}"

_EVASION_STAT = {
    EvasionKind.PHYSICAL: StatName.DEF,
    EvasionKind.SPECIAL: StatName.SPDEF,
    EvasionKind.SPEED: StatName.SPD,
}


def calculate_evasions(
    stats: dict[StatName, StatLine], bonuses: StagedModifierGroup
) -> Evasion:
    values: dict[str, int] = {}
    for kind, stat in _EVASION_STAT.items():
        total = stats[stat].total or 0
        from_stat = min(total // 5, STAT_EVASION_CAP)
        values[kind.value] = clamp(from_stat + bonuses.total_of(kind), 0, EVASION_CAP)
    return Evasion(**values)


def critical_range(crit_mod: int, dice_size: int = DICE_SIZE) -> CritRange:
    shift = max(crit_mod, 0)
    return CritRange(low=1 + shift, high=dice_size - shift)


def is_stuck(ctx: TargetContext, move: Move) -> bool:
    if _STUCK not in ctx.options:
        return False
    if move.type.lower() in STUCK_EXEMPT_TYPES:
        return False
    return not any(f"target:types:{t}" in ctx.options for t in STUCK_EXEMPT_TYPES)


def resolve_target_dc(ctx: TargetContext, move: Move, crit_mod: int) -> TargetDC:
    crit = critical_range(crit_mod)
    target_id = ctx.target.id

    if _VULNERABLE in ctx.options:
        return TargetDC(
            target_id=target_id, slug="vulnerable", value=0, crit_range=crit, auto_hit=True
        )

    ev = ctx.evasion
    stuck = is_stuck(ctx, move)
    category = move.category

    if category == ActionCategory.STATUS:
        slug, value = "speed-evasion", 0 if stuck else ev.speed
    elif category == ActionCategory.PHYSICAL:
        if stuck or ev.physical > ev.speed:
            slug, value = "physical-evasion", ev.physical
        else:
            slug, value = "speed-evasion", ev.speed
    elif category == ActionCategory.SPECIAL:
        if stuck or ev.special > ev.speed:
            slug, value = "special-evasion", ev.special
        else:
            slug, value = "speed-evasion", ev.speed
    else:
        raise ValueError(f"unknown action category {category!r}")

    return TargetDC(target_id=target_id, slug=slug, value=value, crit_range=crit)
