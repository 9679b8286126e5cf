from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.character import CharacterSheet, DerivedStatBlock
    from ..models.checks import Aborted, CheckOutcome, Combatant, TargetSelection
    from .checks.review import CheckReviewer
    from .systems.dice import DieRoller
    from .systems.points import StatAllocator

from ..config import DEFAULT_VARIANTS, RuleVariants
from ..errors import UnknownActionError
from ..logging_listeners import register_listeners
from ..models.enums import Fortune
from .checks.attack import AttackCheck
from .checks.save import SaveCheck
from .systems import stats
from .systems.dice import RandomDieRoller
from .systems.points import allocate_stat_points


def derive_stats(
    sheet: CharacterSheet,
    variants: RuleVariants = DEFAULT_VARIANTS,
    allocator: StatAllocator = allocate_stat_points,
) -> DerivedStatBlock:
    return stats.derive_stats(sheet, variants, allocator)


async def run_check(
    source: Combatant,
    action_slug: str,
    targets: Iterable[TargetSelection] = (),
    variants: RuleVariants = DEFAULT_VARIANTS,
    *,
    roller: DieRoller,
    reviewer: CheckReviewer | None = None,
    fortune: Fortune = Fortune.NONE,
    kind: str = AttackCheck.kind,
    dc: int | None = None,
) -> CheckOutcome | Aborted:
    """Build the check ``kind`` names and run it.

    Attacks look ``action_slug`` up in the source's moves; save checks ignore
    both the action and the targets and compare against ``dc`` when given.
    """
    if kind == SaveCheck.kind:
        check = SaveCheck(
            source,
            variants,
            roller=roller,
            dc=dc,
            reviewer=reviewer,
            fortune=fortune,
        )
        return await check.run()
    if kind != AttackCheck.kind:
        raise ValueError(f"unknown check kind {kind!r}")
    move = source.moves.get(action_slug)
    if move is None:
        raise UnknownActionError(source.id, action_slug)
    check = AttackCheck(
        source,
        move,
        list(targets),
        variants,
        roller=roller,
        reviewer=reviewer,
        fortune=fortune,
    )
    return await check.run()


class RulesEngine:
    """Binds one rule-variant set and one die roller for a host to call into."""

    def __init__(
        self,
        variants: RuleVariants | None = None,
        roller: DieRoller | None = None,
        allocator: StatAllocator = allocate_stat_points,
    ):
        self.variants = variants or RuleVariants.from_env()
        self.roller = roller or RandomDieRoller()
        self.allocator = allocator
        register_listeners()

    def derive_stats(self, sheet: CharacterSheet) -> DerivedStatBlock:
        return derive_stats(sheet, self.variants, self.allocator)

    async def attack(
        self,
        source: Combatant,
        action_slug: str,
        targets: Iterable[TargetSelection] = (),
        *,
        reviewer: CheckReviewer | None = None,
        fortune: Fortune = Fortune.NONE,
    ) -> CheckOutcome | Aborted:
        return await run_check(
            source,
            action_slug,
            targets,
            self.variants,
            roller=self.roller,
            reviewer=reviewer,
            fortune=fortune,
        )

    async def save(
        self,
        source: Combatant,
        dc: int | None = None,
        *,
        reviewer: CheckReviewer | None = None,
        fortune: Fortune = Fortune.NONE,
    ) -> CheckOutcome | Aborted:
        return await run_check(
            source,
            SaveCheck.kind,
            (),
            self.variants,
            roller=self.roller,
            reviewer=reviewer,
            fortune=fortune,
            kind=SaveCheck.kind,
            dc=dc,
        )
