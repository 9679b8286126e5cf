from __future__ import annotations

import math
from typing import Protocol

from ...core.primitives import clamp
from ...models.character import AbilityFlags, Nature, StatLine
from ...models.enums import StatName

MAX_STAGE = 6
POSITIVE_STAGE_STEP = 0.2
NEGATIVE_STAGE_STEP = 0.1
# Points a single stat may take on top of the effective level
PER_STAT_HEADROOM = 5


class StatAllocator(Protocol):
    def __call__(
        self,
        level_up_points: int,
        effective_level: int,
        stats: dict[StatName, StatLine],
        abilities: AbilityFlags,
        nature: Nature,
    ) -> tuple[dict[StatName, StatLine], int]: ...


def stage_multiplier(stage: int) -> float:
    if stage >= 0:
        return 1.0 + POSITIVE_STAGE_STEP * stage
    return 1.0 + NEGATIVE_STAGE_STEP * stage


def nature_shift(stat: StatName, nature: Nature) -> int:
    step = 1 if stat == StatName.HP else 2
    shift = 0
    if nature.raise_stat == stat:
        shift += step
    if nature.lower_stat == stat:
        shift -= step
    return shift


def allocate_stat_points(
    level_up_points: int,
    effective_level: int,
    stats: dict[StatName, StatLine],
    abilities: AbilityFlags,
    nature: Nature,
) -> tuple[dict[StatName, StatLine], int]:
    """Default point-buy: spend invested points in sheet order, then apply stages.

    Each stat accepts at most ``effective_level + PER_STAT_HEADROOM`` points and the
    sum never exceeds ``level_up_points``. HP has no combat stages. Ability flags
    only matter to damage math, so this allocator accepts and ignores them.
    """
    out: dict[StatName, StatLine] = {}
    remaining = max(level_up_points, 0)
    cap = max(effective_level, 0) + PER_STAT_HEADROOM
    for name in StatName:
        line = stats[name].model_copy(deep=True)
        invest = clamp(line.level_up, 0, min(cap, remaining))
        remaining -= invest
        line.level_up = invest

        pre = max(line.value + invest + nature_shift(name, nature), 0)
        if name == StatName.HP:
            line.stage.total = 0
            line.total = pre
        else:
            stage = clamp(line.stage.value + line.stage.mod, -MAX_STAGE, MAX_STAGE)
            line.stage.total = stage
            line.total = math.floor(pre * stage_multiplier(stage))
        out[name] = line
    return out, remaining
