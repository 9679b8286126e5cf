from __future__ import annotations

import logging

from .events import CheckEvent, event_bus
from .models.enums import CheckLogResult

logger = logging.getLogger("rulebook.checks")


def _on_check_event(ev: CheckEvent) -> None:
    if ev.result == CheckLogResult.COMPLETED:
        logger.info(
            "check %s by %s (%s) completed: %s",
            ev.check_slug,
            ev.source_id,
            ev.action_slug,
            ev.outcome,
        )
    elif ev.result == CheckLogResult.ABORTED:
        logger.warning(
            "check %s by %s (%s) aborted at %s: %s (%s)",
            ev.check_slug,
            ev.source_id,
            ev.action_slug,
            ev.state.value,
            ev.reason,
            ev.message,
        )
    else:
        logger.error(
            "check %s by %s (%s) failed at %s: %s",
            ev.check_slug,
            ev.source_id,
            ev.action_slug,
            ev.state.value,
            ev.message,
        )


def register_listeners() -> None:
    event_bus.subscribe(CheckEvent, _on_check_event)
