from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from ...config import RuleVariants
    from ...models.checks import Combatant, TargetContext
    from ..systems.dice import DieRoller
    from .review import CheckReviewer

from ...core.primitives import sluggify
from ...models.checks import Aborted, CheckOutcome, CheckRoll, PostRollEffect
from ...models.enums import AbortReason, CheckState, Fortune
from ...models.modifiers import Modifier, Statistic
from ..logging.logger import log_aborted, log_completed, log_error
from ..systems.evasion import DICE_SIZE
from .gates import MESSAGES, Gate
from .review import ReviewRequest

logger = logging.getLogger(__name__)


class DiceCheck:
    """A single roll resolved through a fixed sequence of stages.

    ``run()`` walks the stages in order; any stage may stop the check by
    returning a gate, in which case the caller gets an ``Aborted`` value and no
    die is drawn. Subclasses fill in the stages; the order is not theirs to change.
    """

    kind: ClassVar[str] = "check"
    dice_size: ClassVar[int] = DICE_SIZE

    def __init__(
        self,
        source: Combatant,
        variants: RuleVariants,
        *,
        roller: DieRoller,
        reviewer: CheckReviewer | None = None,
        fortune: Fortune = Fortune.NONE,
    ) -> None:
        self.source = source
        self.variants = variants
        self.roller = roller
        self.reviewer = reviewer
        self.fortune = fortune
        self.state = CheckState.CREATED
        self.history: list[CheckState] = []
        self.contexts: list[TargetContext] = []
        self.modifiers: list[Modifier] = []
        self.statistic: Statistic | None = None
        self.effects: list[PostRollEffect] = []
        self.options: set[str] = source.options("self")
        self.options |= {f"condition:{c}" for c in source.conditions}

    # ----- identity -----

    @property
    def action_slug(self) -> str:
        return self.kind

    @property
    def label(self) -> str:
        return self.kind.title()

    @property
    def slug(self) -> str:
        return sluggify(self.label)

    @property
    def domains(self) -> tuple[str, ...]:
        return (self.kind,)

    # ----- stages -----

    async def prepare_contexts(self) -> None:
        self.contexts = []

    def gate_checks(self) -> Gate | None:
        return None

    def prepare_modifiers(self) -> None:
        # Copies: toggling during review must not reach the source's own list
        self.modifiers = [
            m.model_copy()
            for domain in self.domains
            for m in self.source.statistic_modifiers.get(domain, [])
        ]

    def prepare_statistic(self) -> None:
        self.statistic = Statistic(slug=self.slug, label=self.label)
        self.statistic.extend(self.modifiers)
        self.statistic.calculate_total(self.options)

    async def await_confirmation(self) -> Gate | None:
        if self.reviewer is None:
            return None
        request = ReviewRequest(
            title=self.label,
            statistic=self.statistic,
            options=set(self.options),
            fortune=self.fortune,
        )
        result = await self.reviewer.review(request)
        if result is None:
            return AbortReason.CANCELLED, MESSAGES[AbortReason.CANCELLED]
        self.options = set(request.options)
        self.fortune = result.fortune
        self.statistic.calculate_total(self.options)
        return None

    async def before_roll(self) -> None:
        return None

    async def draw(self) -> CheckRoll:
        dice = [await self.roller.roll(self.dice_size)]
        if self.fortune != Fortune.NONE:
            dice.append(await self.roller.roll(self.dice_size))
        if self.fortune == Fortune.KEEP_HIGHER:
            die = max(dice)
        elif self.fortune == Fortune.KEEP_LOWER:
            die = min(dice)
        else:
            die = dice[0]
        modifier = self.statistic.total
        return CheckRoll(
            dice=dice,
            die=die,
            fortune=self.fortune,
            modifier=modifier,
            total=die + modifier,
        )

    async def execute(self) -> CheckOutcome:
        roll = await self.draw()
        return self._outcome(roll)

    async def after_roll(self, outcome: CheckOutcome) -> None:
        return None

    # ----- driver -----

    def _enter(self, state: CheckState) -> None:
        self.state = state
        self.history.append(state)
        logger.debug("%s %s: %s", self.kind, self.source.id, state.value)

    def _outcome(self, roll: CheckRoll, **extra) -> CheckOutcome:
        return CheckOutcome(
            slug=self.slug,
            label=self.label,
            source_id=self.source.id,
            action_slug=self.action_slug,
            roll=roll,
            breakdown=self.statistic.breakdown(),
            **extra,
        )

    def _abort(self, gate: Gate) -> Aborted:
        reason, message = gate
        aborted = Aborted(
            reason=reason,
            message=message,
            source_id=self.source.id,
            action_slug=self.action_slug,
            state=self.state,
        )
        log_aborted(self, aborted)
        self._enter(CheckState.ABORTED)
        return aborted

    async def run(self) -> CheckOutcome | Aborted:
        if self.state != CheckState.CREATED:
            raise RuntimeError(f"{self.kind} check already ran (state={self.state.value})")
        try:
            self._enter(CheckState.PREPARE_CONTEXTS)
            await self.prepare_contexts()

            self._enter(CheckState.GATE_CHECKS)
            gate = self.gate_checks()
            if gate is not None:
                return self._abort(gate)

            self._enter(CheckState.PREPARE_MODIFIERS)
            self.prepare_modifiers()

            self._enter(CheckState.PREPARE_STATISTIC)
            self.prepare_statistic()

            self._enter(CheckState.AWAIT_CONFIRMATION)
            gate = await self.await_confirmation()
            if gate is not None:
                return self._abort(gate)

            self._enter(CheckState.BEFORE_ROLL)
            await self.before_roll()

            self._enter(CheckState.EXECUTE)
            outcome = await self.execute()

            self._enter(CheckState.AFTER_ROLL)
            await self.after_roll(outcome)
            outcome.effects.extend(self.effects)

            self._enter(CheckState.DONE)
            outcome.history = list(self.history)
            log_completed(self, outcome)
            return outcome
        except Exception as e:
            log_error(self, e)
            raise
