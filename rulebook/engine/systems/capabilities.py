from __future__ import annotations

import math

from ...models.character import Capabilities, SkillEntry, StageValue
from .skills import skill_total


def calculate_capabilities(
    skills: dict[str, SkillEntry],
    speed_stage: StageValue,
    mods: dict[str, int],
    slowed: bool = False,
) -> Capabilities:
    athletics = skill_total(skills, "athletics")
    acrobatics = skill_total(skills, "acrobatics")
    combat = skill_total(skills, "combat")

    stage = speed_stage.total if speed_stage.total is not None else 0
    overland = 3 + (athletics + acrobatics) // 2 + math.trunc(stage / 2)
    overland += mods.get("overland", 0)
    if slowed:
        overland //= 2
    overland = max(overland, 1)

    return Capabilities(
        overland=overland,
        swim=max(overland // 2 + mods.get("swim", 0), 0),
        throwing_range=4 + athletics + mods.get("throwing_range", 0),
        power=4 + (athletics >= 3) + (combat >= 4) + mods.get("power", 0),
        high_jump=(acrobatics >= 4) + (acrobatics >= 6) + mods.get("high_jump", 0),
        long_jump=acrobatics // 2 + mods.get("long_jump", 0),
    )
