from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..checks.base import DiceCheck
    from ...models.checks import Aborted, CheckOutcome

from ...events import CheckEvent, event_bus
from ...models.enums import CheckLogResult


def log_event(
    check: DiceCheck,
    result: CheckLogResult,
    reason: str | None = None,
    message: str | None = None,
    outcome: dict | None = None,
) -> None:
    event_bus.emit(
        CheckEvent(
            check_slug=check.slug,
            source_id=check.source.id,
            action_slug=check.action_slug,
            state=check.state,
            result=result,
            reason=reason,
            message=message,
            outcome=outcome,
        )
    )


def log_completed(check: DiceCheck, outcome: CheckOutcome) -> None:
    log_event(
        check,
        CheckLogResult.COMPLETED,
        outcome=outcome.model_dump(mode="json", exclude={"breakdown", "history"}),
    )


def log_aborted(check: DiceCheck, aborted: Aborted) -> None:
    log_event(check, CheckLogResult.ABORTED, aborted.reason.value, aborted.message)


def log_error(check: DiceCheck, error: Exception) -> None:
    log_event(check, CheckLogResult.ERROR, type(error).__name__, str(error))
