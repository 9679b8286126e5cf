from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class RuleVariants(BaseModel):
    """Process-wide rule toggles. Read-only while checks run; pass explicitly."""

    model_config = ConfigDict(frozen=True)

    trainer_revamp: bool = False
    use_dex_exp: bool = False
    fail_attack_if_no_target: bool = True
    fail_attack_if_out_of_range: bool = True

    @property
    def level_cap(self) -> int:
        return 25 if self.trainer_revamp else 50

    @classmethod
    def from_env(cls) -> RuleVariants:
        return cls(
            trainer_revamp=_flag("RULEBOOK_TRAINER_REVAMP", False),
            use_dex_exp=_flag("RULEBOOK_USE_DEX_EXP", False),
            fail_attack_if_no_target=_flag("RULEBOOK_FAIL_IF_NO_TARGET", True),
            fail_attack_if_out_of_range=_flag("RULEBOOK_FAIL_IF_OUT_OF_RANGE", True),
        )


DEFAULT_VARIANTS = RuleVariants()
