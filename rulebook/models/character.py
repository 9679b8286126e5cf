from __future__ import annotations

from pydantic import BaseModel, Field

from .enums import ContestStat, SkillRank, StatName
from .modifiers import CharacterModifiers, FlatModifier, Modifier

# ----- Raw sheet (what the host hands us) -----


class Background(BaseModel):
    weak: list[str] = Field(default_factory=list)  # each -1
    strong: str | None = None  # +2
    secondary: str | None = None  # +1


class LevelProgress(BaseModel):
    milestones: int = 0
    misc_exp: int = 0


class SkillEntry(BaseModel):
    value: FlatModifier = Field(default_factory=lambda: FlatModifier(value=2))
    modifier: FlatModifier = Field(default_factory=FlatModifier)
    rank: SkillRank | None = None


class StageValue(BaseModel):
    value: int = 0
    mod: int = 0
    total: int | None = None


class StatLine(BaseModel):
    base: int = 0
    value: int = 0
    level_up: int = 0
    stage: StageValue = Field(default_factory=StageValue)
    total: int | None = None


class Nature(BaseModel):
    raise_stat: StatName | None = None
    lower_stat: StatName | None = None


class AbilityFlags(BaseModel):
    twisted_power: bool = False
    hybrid_armor: bool = False


class ContestEntry(BaseModel):
    mod: int = 0


class Appeal(BaseModel):
    value: int = 0
    mod: int = 0
    total: int | None = None


class CharacterSheet(BaseModel):
    id: str = "trainer.example"
    name: str = "Trainer"
    level: LevelProgress = Field(default_factory=LevelProgress)
    dex_owned: int = 0
    background: Background = Field(default_factory=Background)
    skills: dict[str, SkillEntry] = Field(default_factory=dict)
    level_up: dict[StatName, int] = Field(default_factory=dict)
    stages: dict[StatName, StageValue] = Field(default_factory=dict)
    modifiers: CharacterModifiers = Field(default_factory=CharacterModifiers)
    nature: Nature = Field(default_factory=Nature)
    abilities: AbilityFlags = Field(default_factory=AbilityFlags)
    health_value: int | None = None  # None = full health
    injuries: int = 0
    poisoned: bool = False
    slowed: bool = False
    feats_owned: int = 0
    edges_owned: int = 0
    contests: dict[ContestStat, ContestEntry] = Field(default_factory=dict)
    voltage: int = 0
    appeal: Appeal = Field(default_factory=Appeal)


# ----- Derived block (what we hand back) -----


class Health(BaseModel):
    total: int
    max: int
    value: int
    percent: int
    total_percent: int
    tick: int


class Evasion(BaseModel):
    physical: int = 0
    special: int = 0
    speed: int = 0


class Capabilities(BaseModel):
    overland: int
    swim: int
    throwing_range: int
    power: int
    high_jump: int
    long_jump: int


class SlotCap(BaseModel):
    total: int
    max: int


class ContestLine(BaseModel):
    value: int
    mod: int
    total: int
    dice: int


class DerivedStatBlock(BaseModel):
    level: int
    actual_level: int
    level_up_points: int
    remaining_points: int
    skills: dict[str, SkillEntry]
    stats: dict[StatName, StatLine]
    modifiers: CharacterModifiers
    health: Health
    evasion: Evasion
    capabilities: Capabilities
    feats: SlotCap
    edges: SlotCap
    ap_max: int
    initiative: int
    contests: dict[ContestStat, ContestLine]
    appeal: Appeal
    # Rule-synthesized modifiers keyed by the check domain that consumes them
    statistic_modifiers: dict[str, list[Modifier]] = Field(default_factory=dict)
