from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...models.character import Background

from ...models.character import SkillEntry
from ...models.enums import SkillRank

DEFAULT_SKILLS = (
    "acrobatics",
    "athletics",
    "charm",
    "combat",
    "command",
    "general_ed",
    "medicine_ed",
    "occult_ed",
    "pokemon_ed",
    "technology_ed",
    "focus",
    "guile",
    "intimidate",
    "intuition",
    "perception",
    "stealth",
    "survival",
)

WEAK_PENALTY = -1
STRONG_BONUS = 2
SECONDARY_BONUS = 1

_RANKS = {
    1: SkillRank.PATHETIC,
    2: SkillRank.UNTRAINED,
    3: SkillRank.NOVICE,
    4: SkillRank.ADEPT,
    5: SkillRank.EXPERT,
}


def rank_for(total: int) -> SkillRank:
    if total <= 1:
        return SkillRank.PATHETIC
    return _RANKS.get(total, SkillRank.MASTER)


def with_defaults(skills: dict[str, SkillEntry]) -> dict[str, SkillEntry]:
    out = {name: SkillEntry() for name in DEFAULT_SKILLS}
    out.update({k: v.model_copy(deep=True) for k, v in skills.items()})
    return out


def _bump(skills: dict[str, SkillEntry], name: str | None, delta: int) -> None:
    if not name or name == "blank":
        return
    entry = skills.get(name)
    if entry is not None:
        entry.value.mod += delta


def apply_background(skills: dict[str, SkillEntry], background: Background) -> None:
    for name in background.weak:
        _bump(skills, name, WEAK_PENALTY)
    _bump(skills, background.strong, STRONG_BONUS)
    _bump(skills, background.secondary, SECONDARY_BONUS)


def finalize_skills(skills: dict[str, SkillEntry], skill_bonus: int) -> None:
    for entry in skills.values():
        entry.value.finalize()
        entry.rank = rank_for(entry.value.resolved)
        entry.modifier.total = entry.modifier.value + entry.modifier.mod + skill_bonus


def skill_total(skills: dict[str, SkillEntry], name: str) -> int:
    entry = skills.get(name)
    return 0 if entry is None else entry.value.resolved
