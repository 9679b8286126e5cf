# tests/integration/utils/helpers.py
from rulebook.config import RuleVariants
from rulebook.engine.checks.review import ReviewResult
from rulebook.engine.core import run_check
from rulebook.engine.systems.dice import ScriptedDieRoller


async def _attack(source, slug, targets=(), rolls=(10,), variants=None, **kw):
    """Run one attack with scripted dice. Returns (outcome, roller)."""
    roller = ScriptedDieRoller(rolls)
    outcome = await run_check(
        source,
        slug,
        targets,
        variants or RuleVariants(),
        roller=roller,
        **kw,
    )
    return outcome, roller


class _Reviewer:
    """Scripted stand-in for the modifier dialog."""

    def __init__(self, action=None, result=None, cancel=False):
        self.action = action
        self.result = result
        self.cancel = cancel
        self.seen = []

    async def review(self, request):
        self.seen.append(request)
        if self.action:
            self.action(request)
        if self.cancel:
            return None
        return self.result or ReviewResult(fortune=request.fortune)
