import logging

import pytest

from rulebook.config import RuleVariants
from rulebook.core.primitives import first_int, round_half_up, sluggify
from rulebook.engine.core import RulesEngine, run_check
from rulebook.engine.systems.dice import RandomDieRoller, ScriptedDieRoller
from rulebook.events import CheckEvent, EventBus
from rulebook.logging_listeners import register_listeners
from rulebook.models.enums import CheckLogResult, CheckState
from rulebook.models.modifiers import Modifier
from tests.integration.utils.data import attacker_template, selection, target_template
from tests.integration.utils.helpers import _attack


def _saver():
    return attacker_template(
        statistic_modifiers={"save-check": [Modifier("save-check-mod", "Save Check Mod", 2)]}
    )


def test_variants_default_without_env():
    v = RuleVariants.from_env()
    assert v == RuleVariants()
    assert v.level_cap == 50


def test_variants_read_from_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("RULEBOOK_TRAINER_REVAMP", "true")
    monkeypatch.setenv("RULEBOOK_FAIL_IF_NO_TARGET", "0")
    v = RuleVariants.from_env()
    assert v.trainer_revamp is True
    assert v.fail_attack_if_no_target is False
    assert v.fail_attack_if_out_of_range is True
    assert v.level_cap == 25


def test_variants_are_frozen():
    with pytest.raises(Exception):
        RuleVariants().trainer_revamp = True


def test_primitives():
    assert sluggify("Accuracy Bonus!") == "accuracy-bonus"
    assert first_int("Burst 2, 6 Targets", 1) == 2
    assert first_int(None, 1) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2


def test_bus_dedupes_and_unsubscribes():
    bus = EventBus()
    seen = []
    bus.subscribe(CheckEvent, seen.append)
    bus.subscribe(CheckEvent, seen.append)
    ev = CheckEvent("s", "src", "a", CheckState.DONE, CheckLogResult.COMPLETED)
    bus.emit(ev)
    assert seen == [ev]
    bus.unsubscribe(CheckEvent, seen.append)
    bus.emit(ev)
    assert seen == [ev]


@pytest.mark.asyncio
async def test_completed_check_emits_one_event(events):
    await _attack(attacker_template(), "tackle", [selection(target_template())], rolls=[10])
    [ev] = events
    assert ev.result == CheckLogResult.COMPLETED
    assert ev.state == CheckState.DONE
    assert ev.check_slug == "tackle-attack-roll"
    assert ev.outcome["roll"]["die"] == 10
    assert "breakdown" not in ev.outcome


@pytest.mark.asyncio
async def test_aborted_check_emits_reason(events):
    await _attack(attacker_template(), "tackle", [selection(target_template(), 4)])
    [ev] = events
    assert ev.result == CheckLogResult.ABORTED
    assert ev.reason == "out-of-range"
    assert ev.state == CheckState.GATE_CHECKS


@pytest.mark.asyncio
async def test_failed_check_emits_error(events):
    with pytest.raises(RuntimeError):
        await _attack(attacker_template(), "tackle", [selection(target_template())], rolls=[])
    [ev] = events
    assert ev.result == CheckLogResult.ERROR
    assert ev.reason == "RuntimeError"
    assert ev.state == CheckState.EXECUTE


@pytest.mark.asyncio
async def test_listener_logs_aborts_as_warnings(caplog):
    register_listeners()
    with caplog.at_level(logging.WARNING, logger="rulebook.checks"):
        await _attack(
            attacker_template(conditions={"sleep"}), "tackle", [selection(target_template())]
        )
    assert "aborted at gate_checks: sleeping" in caplog.text


@pytest.mark.asyncio
async def test_random_roller_stays_in_bounds():
    roller = RandomDieRoller(seed=7)
    results = [await roller.roll(20) for _ in range(200)]
    assert min(results) >= 1 and max(results) <= 20
    with pytest.raises(ValueError):
        await roller.roll(0)


@pytest.mark.asyncio
async def test_scripted_roller_rejects_impossible_results():
    with pytest.raises(ValueError):
        await ScriptedDieRoller([21]).roll(20)


@pytest.mark.asyncio
async def test_engine_uses_env_variants(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("RULEBOOK_FAIL_IF_OUT_OF_RANGE", "false")
    engine = RulesEngine(roller=ScriptedDieRoller([10]))
    out = await engine.attack(attacker_template(), "tackle", [selection(target_template(), 9)])
    assert out.executed


@pytest.mark.asyncio
async def test_engine_save_check_against_dc():
    engine = RulesEngine(RuleVariants(), roller=ScriptedDieRoller([9, 7]))
    passed = await engine.save(_saver(), dc=11)
    assert (passed.roll.total, passed.success) == (11, True)
    failed = await engine.save(_saver(), dc=11)
    assert failed.success is False
    assert failed.slug == "save-check"
    assert failed.targets == []


@pytest.mark.asyncio
async def test_run_check_dispatches_save_kind():
    roller = ScriptedDieRoller([12])
    out = await run_check(
        _saver(),
        "unused",
        [selection(target_template(), 40)],
        RuleVariants(),
        roller=roller,
        kind="save-check",
        dc=15,
    )
    assert out.executed
    assert out.action_slug == "save-check"
    assert (out.roll.total, out.dc, out.success) == (14, 15, False)
    assert out.targets == []
    assert roller.calls == [20]


@pytest.mark.asyncio
async def test_run_check_rejects_unknown_kind():
    with pytest.raises(ValueError, match="unknown check kind"):
        await run_check(attacker_template(), "tackle", roller=ScriptedDieRoller([10]), kind="skill")

