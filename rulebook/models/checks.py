from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from ..core.primitives import first_int
from .character import DerivedStatBlock, Evasion
from .enums import AbortReason, ActionCategory, CheckState, Fortune, Frequency
from .evaluation import StatBreakdown
from .modifiers import ALWAYS_HITS, Modifier, Number

# ----- Inputs -----


class Move(BaseModel):
    slug: str
    name: str
    accuracy: int | str | None = 2  # "-" / None: never misses
    range: str = "Melee, 1 Target"
    category: ActionCategory = ActionCategory.PHYSICAL
    type: str = "normal"
    frequency: Frequency = Frequency.AT_WILL

    @property
    def is_self(self) -> bool:
        return self.range.strip().lower().startswith("self")

    @property
    def is_melee(self) -> bool:
        return "melee" in self.range.lower()

    @property
    def is_ranged(self) -> bool:
        return not self.is_self and not self.is_melee

    @property
    def effective_range(self) -> int:
        if not self.is_ranged:
            return 1
        return first_int(self.range, 1)

    @property
    def accuracy_cost(self) -> Number:
        ac = self.accuracy
        if isinstance(ac, int):
            return ac
        if isinstance(ac, str):
            try:
                return int(ac.strip())
            except ValueError:
                return ALWAYS_HITS
        return ALWAYS_HITS


class Combatant(BaseModel):
    """Snapshot of an entity taking part in a check, as a source or a target."""

    id: str
    name: str = ""
    types: list[str] = Field(default_factory=list)
    conditions: set[str] = Field(default_factory=set)
    disabled_moves: set[str] = Field(default_factory=set)
    evasion: Evasion | None = None
    accuracy_bonus: int = 0
    crit_range: int = 0
    moves: dict[str, Move] = Field(default_factory=dict)
    statistic_modifiers: dict[str, list[Modifier]] = Field(default_factory=dict)

    @field_validator("conditions", "disabled_moves", mode="before")
    @classmethod
    def _plain_strings(cls, v):
        return {str(getattr(c, "value", c)) for c in v}

    @classmethod
    def from_derived(
        cls, id: str, derived: DerivedStatBlock, **data
    ) -> Combatant:
        mods = derived.modifiers
        return cls(
            id=id,
            evasion=derived.evasion.model_copy(),
            accuracy_bonus=mods.accuracy_bonus.resolved,
            crit_range=mods.crit_range.resolved,
            statistic_modifiers={
                k: [m.model_copy() for m in v]
                for k, v in derived.statistic_modifiers.items()
            },
            **data,
        )

    def has(self, condition) -> bool:
        return str(getattr(condition, "value", condition)) in self.conditions

    def options(self, prefix: str = "self") -> set[str]:
        out = {f"{prefix}:condition:{c}" for c in self.conditions}
        out |= {f"{prefix}:types:{t.lower()}" for t in self.types}
        out |= {f"{prefix}:condition:disabled:{m}" for m in self.disabled_moves}
        return out


class TargetSelection(BaseModel):
    target: Combatant
    distance: float | None = None


# ----- Pipeline state -----


class CritRange(BaseModel):
    low: int
    high: int

    @property
    def width(self) -> int:
        return max(0, self.high - self.low + 1)

    def __contains__(self, die: int) -> bool:
        return self.low <= die <= self.high


class TargetDC(BaseModel):
    target_id: str
    slug: str
    value: int
    crit_range: CritRange
    # Vulnerable targets are hit whatever the total
    auto_hit: bool = False


class TargetContext(BaseModel):
    target: Combatant
    distance: float | None = None
    options: frozenset[str] = frozenset()
    evasion: Evasion
    dc: TargetDC | None = None


# ----- Outputs -----


class TargetResult(BaseModel):
    target_id: str
    dc_slug: str
    threshold: int
    crit_range: CritRange
    hit: bool
    critical: bool


class CheckRoll(BaseModel):
    dice: list[int]
    die: int
    fortune: Fortune = Fortune.NONE
    modifier: float
    total: float


class PostRollEffect(BaseModel):
    slug: str
    die: int | None = None
    result: str


class CheckOutcome(BaseModel):
    executed: Literal[True] = True
    slug: str
    label: str
    source_id: str
    action_slug: str
    roll: CheckRoll
    targets: list[TargetResult] = Field(default_factory=list)
    # Untargeted checks (saves) compare against a single DC instead
    dc: int | None = None
    success: bool | None = None
    breakdown: StatBreakdown
    effects: list[PostRollEffect] = Field(default_factory=list)
    history: list[CheckState] = Field(default_factory=list)


class Aborted(BaseModel):
    executed: Literal[False] = False
    reason: AbortReason
    message: str
    source_id: str
    action_slug: str
    state: CheckState
