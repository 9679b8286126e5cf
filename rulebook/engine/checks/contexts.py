from __future__ import annotations

from collections.abc import Iterable

from ...errors import InvariantViolation
from ...models.checks import Combatant, TargetContext, TargetSelection


def context_for(target: Combatant, distance: float | None = None) -> TargetContext:
    if target.evasion is None:
        raise InvariantViolation(f"target {target.id!r} has no evasion data")
    return TargetContext(
        target=target,
        distance=distance,
        options=frozenset(target.options("target")),
        evasion=target.evasion,
    )


def resolve_contexts(
    source: Combatant,
    selections: Iterable[TargetSelection],
    *,
    self_only: bool,
) -> list[TargetContext]:
    """One context per selected target, in selection order; self checks wrap the source."""
    if self_only:
        return [context_for(source)]
    return [context_for(sel.target, sel.distance) for sel in selections]
