import math

import pytest

from rulebook.config import RuleVariants
from rulebook.engine.checks.attack import AttackCheck
from rulebook.engine.checks.review import ReviewResult
from rulebook.engine.systems.dice import ScriptedDieRoller
from rulebook.errors import UnknownActionError
from rulebook.models.enums import AbortReason, CheckState, Fortune
from rulebook.models.modifiers import Modifier
from tests.integration.utils.data import (
    attacker_template,
    selection,
    tackle_template,
    target_template,
)
from tests.integration.utils.helpers import _attack, _Reviewer

FULL_RUN = [
    CheckState.PREPARE_CONTEXTS,
    CheckState.GATE_CHECKS,
    CheckState.PREPARE_MODIFIERS,
    CheckState.PREPARE_STATISTIC,
    CheckState.AWAIT_CONFIRMATION,
    CheckState.BEFORE_ROLL,
    CheckState.EXECUTE,
    CheckState.AFTER_ROLL,
    CheckState.DONE,
]


@pytest.mark.asyncio
async def test_hit_against_physical_evasion():
    out, roller = await _attack(attacker_template(), "tackle", [selection(target_template())], rolls=[10])
    assert out.executed
    assert (out.roll.die, out.roll.modifier, out.roll.total) == (10, -2, 8)
    [res] = out.targets
    assert (res.dc_slug, res.threshold, res.hit) == ("physical-evasion", 2, True)
    assert roller.calls == [20]
    assert out.history == FULL_RUN
    assert out.label == "Tackle Attack Roll"
    assert out.slug == "tackle-attack-roll"


@pytest.mark.asyncio
async def test_miss_is_executed_not_aborted():
    target = target_template(physical=9)
    out, _ = await _attack(attacker_template(), "tackle", [selection(target)], rolls=[5])
    assert out.executed
    assert out.targets[0].hit is False


@pytest.mark.asyncio
async def test_out_of_range_aborts_without_drawing():
    out, roller = await _attack(attacker_template(), "tackle", [selection(target_template(), 3)])
    assert out.executed is False
    assert out.reason == AbortReason.OUT_OF_RANGE
    assert out.state == CheckState.GATE_CHECKS
    assert roller.calls == []


@pytest.mark.asyncio
async def test_no_target_aborts_without_drawing():
    out, roller = await _attack(attacker_template(), "tackle", [])
    assert out.reason == AbortReason.NO_TARGET
    assert roller.calls == []


@pytest.mark.asyncio
async def test_no_target_allowed_resolves_against_source():
    source = attacker_template()
    relaxed = RuleVariants(fail_attack_if_no_target=False)
    out, _ = await _attack(source, "tackle", [], rolls=[12], variants=relaxed)
    assert [t.target_id for t in out.targets] == [source.id]


@pytest.mark.asyncio
async def test_disabled_source_aborts_before_modifiers():
    out, roller = await _attack(
        attacker_template(conditions={"frozen"}), "tackle", [selection(target_template())]
    )
    assert out.reason == AbortReason.FROZEN
    assert roller.calls == []


@pytest.mark.asyncio
async def test_unknown_action_is_a_programmer_error():
    with pytest.raises(UnknownActionError) as exc:
        await _attack(attacker_template(), "hyper-beam", [selection(target_template())])
    assert exc.value.action_slug == "hyper-beam"


@pytest.mark.asyncio
async def test_vulnerable_target_is_hit_on_a_one():
    target = target_template(physical=9, speed=9, conditions={"vulnerable"})
    out, _ = await _attack(attacker_template(), "tackle", [selection(target)], rolls=[1])
    [res] = out.targets
    assert out.roll.total == -1
    assert (res.threshold, res.hit) == (0, True)


@pytest.mark.asyncio
async def test_one_draw_shared_across_targets_in_order():
    a = target_template("c.a", physical=3, speed=1)
    b = target_template("c.b", physical=9, speed=1)
    out, roller = await _attack(
        attacker_template(), "tackle", [selection(a), selection(b)], rolls=[6]
    )
    assert roller.calls == [20]
    assert [(t.target_id, t.hit) for t in out.targets] == [("c.a", True), ("c.b", False)]


@pytest.mark.asyncio
async def test_crit_range_shrinks_with_crit_modifier():
    source = attacker_template(crit_range=3)
    out, _ = await _attack(source, "tackle", [selection(target_template())], rolls=[18])
    [res] = out.targets
    assert (res.crit_range.low, res.crit_range.high) == (4, 17)
    assert res.critical is False


@pytest.mark.asyncio
async def test_unparseable_accuracy_always_hits():
    out, _ = await _attack(attacker_template(), "swords-dance", [], rolls=[1])
    assert math.isinf(out.roll.total)
    assert out.targets[0].hit


@pytest.mark.asyncio
async def test_self_move_ignores_range_and_selections():
    source = attacker_template()
    far = selection(target_template(), 50)
    out, _ = await _attack(source, "swords-dance", [far], rolls=[3])
    assert [t.target_id for t in out.targets] == [source.id]


@pytest.mark.asyncio
async def test_accuracy_bonus_and_domain_modifiers_are_assembled():
    source = attacker_template(
        accuracy_bonus=2,
        statistic_modifiers={
            "attack": [Modifier("focus", "Focus", 1)],
            "tackle-attack": [Modifier("tackle-training", "Tackle Training", 1)],
            "ember-attack": [Modifier("fire-training", "Fire Training", 5)],
            "save-check": [Modifier("save-check-mod", "Save Check Mod", 4)],
        },
    )
    out, _ = await _attack(source, "tackle", [selection(target_template())], rolls=[10])
    slugs = [t.slug for t in out.breakdown.terms]
    assert slugs == ["accuracy-check", "focus", "tackle-training", "accuracy-bonus"]
    assert out.roll.modifier == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "fortune, die",
    [(Fortune.KEEP_HIGHER, 15), (Fortune.KEEP_LOWER, 4)],
)
async def test_fortune_draws_two_dice(fortune, die):
    out, roller = await _attack(
        attacker_template(), "tackle", [selection(target_template())], rolls=[4, 15], fortune=fortune
    )
    assert roller.calls == [20, 20]
    assert out.roll.dice == [4, 15]
    assert out.roll.die == die


@pytest.mark.asyncio
async def test_confused_attacker_rolls_again_after_attack():
    out, roller = await _attack(
        attacker_template(conditions={"confused"}),
        "tackle",
        [selection(target_template())],
        rolls=[10, 5],
    )
    assert roller.calls == [20, 20]
    [effect] = out.effects
    assert (effect.slug, effect.die, effect.result) == ("confusion", 5, "self-hit")


@pytest.mark.asyncio
async def test_reviewer_added_modifier_counts():
    reviewer = _Reviewer(action=lambda req: req.add_modifier("Cheer", 3))
    out, _ = await _attack(
        attacker_template(), "tackle", [selection(target_template())], rolls=[10], reviewer=reviewer
    )
    assert out.roll.modifier == 1
    assert reviewer.seen[0].title == "Tackle Attack Roll"


@pytest.mark.asyncio
async def test_reviewer_toggle_does_not_reach_source():
    source = attacker_template(statistic_modifiers={"attack": [Modifier("focus", "Focus", 1)]})
    reviewer = _Reviewer(action=lambda req: req.statistic.toggle("focus"))
    out, _ = await _attack(
        source, "tackle", [selection(target_template())], rolls=[10], reviewer=reviewer
    )
    assert out.roll.modifier == -2
    assert source.statistic_modifiers["attack"][0].enabled


@pytest.mark.asyncio
async def test_reviewer_substitution_option():
    source = attacker_template(
        statistic_modifiers={
            "attack": [Modifier("focus", "Focus", 4, option="substitute:focus")]
        }
    )
    plain, _ = await _attack(source, "tackle", [selection(target_template())], rolls=[10])
    assert plain.roll.modifier == -2
    reviewer = _Reviewer(action=lambda req: req.substitute("focus"))
    subbed, _ = await _attack(
        source, "tackle", [selection(target_template())], rolls=[10], reviewer=reviewer
    )
    assert subbed.roll.modifier == 2


@pytest.mark.asyncio
async def test_reviewer_can_switch_fortune():
    reviewer = _Reviewer(result=ReviewResult(fortune=Fortune.KEEP_HIGHER))
    out, roller = await _attack(
        attacker_template(), "tackle", [selection(target_template())], rolls=[2, 17], reviewer=reviewer
    )
    assert out.roll.die == 17
    assert len(roller.calls) == 2


@pytest.mark.asyncio
async def test_cancelled_review_aborts_without_drawing():
    reviewer = _Reviewer(cancel=True)
    out, roller = await _attack(
        attacker_template(), "tackle", [selection(target_template())], reviewer=reviewer
    )
    assert out.reason == AbortReason.CANCELLED
    assert out.state == CheckState.AWAIT_CONFIRMATION
    assert roller.calls == []


@pytest.mark.asyncio
async def test_check_runs_only_once():
    check = AttackCheck(
        attacker_template(),
        tackle_template(),
        [selection(target_template())],
        RuleVariants(),
        roller=ScriptedDieRoller([10, 10]),
    )
    await check.run()
    with pytest.raises(RuntimeError):
        await check.run()


@pytest.mark.asyncio
async def test_roller_failure_propagates():
    with pytest.raises(RuntimeError, match="ran out"):
        await _attack(attacker_template(), "tackle", [selection(target_template())], rolls=[])
