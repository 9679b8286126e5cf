# Shared fixtures: rule variants, a clean environment and captured check events.

import pytest

from rulebook.config import RuleVariants
from rulebook.events import CheckEvent, event_bus

_ENV_FLAGS = (
    "RULEBOOK_TRAINER_REVAMP",
    "RULEBOOK_USE_DEX_EXP",
    "RULEBOOK_FAIL_IF_NO_TARGET",
    "RULEBOOK_FAIL_IF_OUT_OF_RANGE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    # Variant flags from the developer's shell must not leak into tests
    for name in _ENV_FLAGS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def variants() -> RuleVariants:
    return RuleVariants()


@pytest.fixture()
def revamp() -> RuleVariants:
    return RuleVariants(trainer_revamp=True)


@pytest.fixture()
def events():
    """Every CheckEvent emitted while the test runs, in order."""
    seen: list[CheckEvent] = []
    event_bus.subscribe(CheckEvent, seen.append)
    try:
        yield seen
    finally:
        event_bus.unsubscribe(CheckEvent, seen.append)
