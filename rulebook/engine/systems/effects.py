from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .dice import DieRoller

from ...models.checks import PostRollEffect
from .evasion import DICE_SIZE

CONFUSION_SELF_HIT_MAX = 8
CONFUSION_CURED_MIN = 16


async def confusion_check(roller: DieRoller) -> PostRollEffect:
    """Confused attackers roll again after the attack: low hurts them, high snaps them out."""
    die = await roller.roll(DICE_SIZE)
    if die <= CONFUSION_SELF_HIT_MAX:
        result = "self-hit"
    elif die >= CONFUSION_CURED_MIN:
        result = "cured"
    else:
        result = "none"
    return PostRollEffect(slug="confusion", die=die, result=result)
