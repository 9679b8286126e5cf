from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import ClassVar

from pydantic import BaseModel, Field, PrivateAttr

from ..core.primitives import sluggify
from ..errors import InvariantViolation
from .enums import EvasionKind, StatName
from .evaluation import StatBreakdown, StatTerm

logger = logging.getLogger(__name__)

Number = int | float

# Accuracy cost that cannot be parsed: the check always hits
ALWAYS_HITS = float("inf")


class Modifier(BaseModel):
    slug: str = Field(frozen=True)
    label: str = Field(frozen=True)
    value: Number = Field(frozen=True)
    # Substitution modifiers only count while this option is active
    option: str | None = Field(default=None, frozen=True)
    enabled: bool = True

    def __init__(self, slug: str, label: str, value: Number, **data):
        super().__init__(slug=slug, label=label, value=value, **data)

    @classmethod
    def from_label(cls, label: str, value: Number, **data) -> Modifier:
        return cls(sluggify(label), label, value, **data)

    def toggle(self) -> bool:
        self.enabled = not self.enabled
        return self.enabled

    def counts(self, options: Iterable[str] = ()) -> bool:
        if not self.enabled:
            return False
        return self.option is None or self.option in options


class Statistic(BaseModel):
    """Ordered modifiers with a total that must be recomputed before each use.

    Every modifier gets an integer key scoped to this statistic. Keys are never
    reused, so a reviewer can refer to "the third modifier" even after others
    were added around it.
    """

    slug: str
    label: str
    modifiers: list[Modifier] = Field(default_factory=list)

    _keys: list[int] = PrivateAttr(default_factory=list)
    _next_key: int = PrivateAttr(default=0)
    _total: Number | None = PrivateAttr(default=None)
    _seen: tuple | None = PrivateAttr(default=None)
    _options: frozenset[str] = PrivateAttr(default_factory=frozenset)

    def model_post_init(self, __context) -> None:
        self._keys = list(range(len(self.modifiers)))
        self._next_key = len(self.modifiers)

    def _fingerprint(self) -> tuple:
        return tuple((id(m), m.enabled) for m in self.modifiers)

    def push(self, modifier: Modifier) -> int:
        prior = self.get(modifier.slug)
        if prior is not None and prior.value != modifier.value:
            logger.warning(
                "statistic %s: slug %r pushed twice (%s, then %s); lookups see the latest",
                self.slug,
                modifier.slug,
                prior.value,
                modifier.value,
            )
        key = self._next_key
        self._next_key += 1
        self.modifiers.append(modifier)
        self._keys.append(key)
        return key

    def extend(self, modifiers: Iterable[Modifier]) -> list[int]:
        return [self.push(m) for m in modifiers]

    def get(self, slug: str) -> Modifier | None:
        for m in reversed(self.modifiers):
            if m.slug == slug:
                return m
        return None

    def by_key(self, key: int) -> Modifier:
        try:
            return self.modifiers[self._keys.index(key)]
        except ValueError:
            raise KeyError(key) from None

    def toggle(self, ref: str | int) -> Modifier:
        if isinstance(ref, int):
            m = self.by_key(ref)
        else:
            m = self.get(ref)
            if m is None:
                raise KeyError(ref)
        m.toggle()
        return m

    def calculate_total(self, options: Iterable[str] | None = None) -> Number:
        opts = frozenset(options or ())
        self._options = opts
        self._total = sum((m.value for m in self.modifiers if m.counts(opts)), 0)
        self._seen = self._fingerprint()
        return self._total

    @property
    def total(self) -> Number:
        if self._total is None:
            raise InvariantViolation(
                f"statistic {self.slug!r} read before calculate_total()"
            )
        if self._seen != self._fingerprint():
            raise InvariantViolation(
                f"statistic {self.slug!r} changed since its last calculate_total()"
            )
        return self._total

    def breakdown(self) -> StatBreakdown:
        result = self.total
        terms = [
            StatTerm(
                key=k,
                slug=m.slug,
                label=m.label,
                value=float(m.value),
                counted=m.counts(self._options),
                note=None if m.option is None else f"option:{m.option}",
            )
            for k, m in zip(self._keys, self.modifiers)
        ]
        return StatBreakdown(
            slug=self.slug, label=self.label, terms=terms, result=float(result)
        )


# ---------------- Character modifier groups ----------------


class FlatModifier(BaseModel):
    value: int = 0
    mod: int = 0
    total: int | None = None  # filled by finalize()

    def finalize(self) -> FlatModifier:
        self.total = self.value + self.mod
        return self

    @property
    def resolved(self) -> int:
        if self.total is None:
            raise InvariantViolation("modifier group read before finalize()")
        return self.total


class StagedModifierGroup(BaseModel):
    subkeys: dict[str, FlatModifier] = Field(default_factory=dict)

    def finalize(self) -> StagedModifierGroup:
        for sub in self.subkeys.values():
            sub.finalize()
        return self

    def __getitem__(self, key: str) -> FlatModifier:
        return self.subkeys[str(getattr(key, "value", key))]

    def total_of(self, key) -> int:
        sub = self.subkeys.get(str(getattr(key, "value", key)))
        return 0 if sub is None else sub.resolved


def _stat_group() -> StagedModifierGroup:
    return StagedModifierGroup(subkeys={s.value: FlatModifier() for s in StatName})


def _evasion_group() -> StagedModifierGroup:
    return StagedModifierGroup(subkeys={e.value: FlatModifier() for e in EvasionKind})


class CharacterModifiers(BaseModel):
    accuracy_bonus: FlatModifier = Field(default_factory=FlatModifier)
    crit_range: FlatModifier = Field(default_factory=FlatModifier)
    save_checks: FlatModifier = Field(default_factory=FlatModifier)
    stat_points: FlatModifier = Field(default_factory=FlatModifier)
    skill_bonus: FlatModifier = Field(default_factory=FlatModifier)
    initiative: FlatModifier = Field(default_factory=FlatModifier)
    base_stats: StagedModifierGroup = Field(default_factory=_stat_group)
    evasion: StagedModifierGroup = Field(default_factory=_evasion_group)

    # Flags: never totalled
    hardened: bool = False
    flinch_count: int = 0
    immune_to_effect_damage: bool = False
    type_overwrite: str | None = None
    capabilities: dict[str, int] = Field(default_factory=dict)

    FLAT_KEYS: ClassVar[tuple[str, ...]] = (
        "accuracy_bonus",
        "crit_range",
        "save_checks",
        "stat_points",
        "skill_bonus",
        "initiative",
    )
    STAGED_KEYS: ClassVar[tuple[str, ...]] = ("base_stats", "evasion")

    def finalize(self) -> CharacterModifiers:
        for key in self.FLAT_KEYS:
            getattr(self, key).finalize()
        for key in self.STAGED_KEYS:
            getattr(self, key).finalize()
        return self
