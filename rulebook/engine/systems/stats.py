from __future__ import annotations

import math

from ...config import DEFAULT_VARIANTS, RuleVariants
from ...core.primitives import clamp, round_half_up
from ...models.character import (
    Appeal,
    CharacterSheet,
    ContestEntry,
    ContestLine,
    DerivedStatBlock,
    Health,
    LevelProgress,
    SlotCap,
    StageValue,
    StatLine,
)
from ...models.enums import CONTEST_COMBAT_STAT, ContestStat, StatName
from ...models.modifiers import CharacterModifiers, Modifier
from . import skills as skill_rules
from .capabilities import calculate_capabilities
from .evasion import calculate_evasions
from .points import StatAllocator, allocate_stat_points

BASE_HP = 10
BASE_STAT = 5
STAT_POINT_FLOOR = 9
CONTEST_CAP = 3
INJURY_CAP_HARDENED = 5


# ----- Pass 1 -----


def current_level(progress: LevelProgress, dex_exp: int, variants: RuleVariants) -> int:
    raw = 1 + progress.milestones + math.trunc(progress.misc_exp / 10 + dex_exp / 10)
    return clamp(raw, 1, variants.level_cap)


# ----- Pass 2 -----


def level_up_budget(level: int, stat_points: int, variants: RuleVariants) -> int:
    factor = level * 2 if variants.trainer_revamp else level
    return factor + stat_points + STAT_POINT_FLOOR


def actual_level(level: int, budget: int, stats: dict[StatName, StatLine], stat_points: int) -> int:
    """Level the sheet has actually paid for; unspent points pull it down, never up."""
    leftover = budget - sum(line.level_up for line in stats.values())
    unpaid = min(leftover - stat_points, max(leftover, 0))
    return max(1, level - max(0, unpaid))


def base_stat_lines(sheet: CharacterSheet, mods: CharacterModifiers) -> dict[StatName, StatLine]:
    out: dict[StatName, StatLine] = {}
    for name in StatName:
        base = BASE_HP if name == StatName.HP else BASE_STAT
        stage = sheet.stages.get(name, StageValue())
        out[name] = StatLine(
            base=base,
            value=mods.base_stats.total_of(name) + base,
            level_up=sheet.level_up.get(name, 0),
            stage=StageValue(value=stage.value, mod=stage.mod),
        )
    return out


def calculate_health(
    level: int,
    hp_total: int,
    injuries: int,
    hardened: bool,
    current: int | None,
    variants: RuleVariants,
) -> Health:
    total = 10 + level * (4 if variants.trainer_revamp else 2) + hp_total * 3
    if injuries > 0:
        counted = min(injuries, INJURY_CAP_HARDENED) if hardened else injuries
        hp_max = max(math.floor(total * (1 - counted / 10)), 0)
    else:
        hp_max = total
    value = hp_max if current is None else current
    return Health(
        total=total,
        max=hp_max,
        value=value,
        percent=round_half_up(value / hp_max * 100) if hp_max else 0,
        total_percent=round_half_up(value / total * 100) if total else 0,
        tick=hp_max // 10,
    )


def feat_cap(level: int, variants: RuleVariants) -> int:
    return 4 + (level if variants.trainer_revamp else math.ceil(level / 2))


def edge_cap(level: int, variants: RuleVariants) -> int:
    cap = 4 + (level if variants.trainer_revamp else level // 2)
    cap += sum(level >= t for t in (2, 6, 12))
    if variants.trainer_revamp:
        cap += sum(level >= t for t in (5, 10, 15, 20, 25))
    return cap


def ap_cap(level: int) -> int:
    return 5 + level // 5


def contest_line(combat_total: int, mod: int, voltage: int) -> ContestLine:
    value = min(combat_total // 10, CONTEST_CAP)
    total = min(value + mod, CONTEST_CAP)
    return ContestLine(value=value, mod=mod, total=total, dice=total + voltage)


def synthesize_modifiers(mods: CharacterModifiers) -> dict[str, list[Modifier]]:
    out: dict[str, list[Modifier]] = {}
    if mods.save_checks.resolved != 0:
        out.setdefault("save-check", []).append(
            Modifier.from_label("Save Check Mod", mods.save_checks.resolved)
        )
    return out


def derive_stats(
    sheet: CharacterSheet,
    variants: RuleVariants = DEFAULT_VARIANTS,
    allocator: StatAllocator = allocate_stat_points,
) -> DerivedStatBlock:
    """Turn a raw sheet into a fully derived stat block.

    Pass 1 adjusts skills from the background and settles the level. Pass 2
    totals every modifier group, allocates stat points and derives everything
    that depends on final stat totals. The input sheet is not modified.
    """
    sheet = sheet.model_copy(deep=True)

    # Pass 1
    skills = skill_rules.with_defaults(sheet.skills)
    skill_rules.apply_background(skills, sheet.background)
    dex_exp = sheet.dex_owned if variants.use_dex_exp else 0
    level = current_level(sheet.level, dex_exp, variants)

    # Pass 2
    mods = sheet.modifiers.finalize()
    skill_rules.finalize_skills(skills, mods.skill_bonus.resolved)
    stat_points = mods.stat_points.resolved
    budget = level_up_budget(level, stat_points, variants)

    lines = base_stat_lines(sheet, mods)
    if sheet.poisoned:
        lines[StatName.SPDEF].stage.mod -= 2

    effective = actual_level(level, budget, lines, stat_points)
    stats, remaining = allocator(
        budget,
        effective * 2 if variants.trainer_revamp else effective,
        lines,
        sheet.abilities,
        sheet.nature,
    )

    health = calculate_health(
        level,
        stats[StatName.HP].total,
        sheet.injuries,
        mods.hardened,
        sheet.health_value,
        variants,
    )

    voltage = sheet.voltage
    contests = {
        stat: contest_line(
            stats[CONTEST_COMBAT_STAT[stat]].total,
            sheet.contests.get(stat, ContestEntry()).mod,
            voltage,
        )
        for stat in ContestStat
    }
    appeal = Appeal(
        value=sheet.appeal.value,
        mod=sheet.appeal.mod,
        total=sheet.appeal.value + sheet.appeal.mod,
    )

    return DerivedStatBlock(
        level=level,
        actual_level=effective,
        level_up_points=budget,
        remaining_points=remaining,
        skills=skills,
        stats=stats,
        modifiers=mods,
        health=health,
        evasion=calculate_evasions(stats, mods.evasion),
        capabilities=calculate_capabilities(
            skills, stats[StatName.SPD].stage, mods.capabilities, sheet.slowed
        ),
        feats=SlotCap(total=sheet.feats_owned, max=feat_cap(level, variants)),
        edges=SlotCap(total=sheet.edges_owned, max=edge_cap(level, variants)),
        ap_max=ap_cap(level),
        initiative=stats[StatName.SPD].total + mods.initiative.resolved,
        contests=contests,
        appeal=appeal,
        statistic_modifiers=synthesize_modifiers(mods),
    )
