from enum import Enum


class StatName(str, Enum):
    HP = "hp"
    ATK = "atk"
    DEF = "def"
    SPATK = "spatk"
    SPDEF = "spdef"
    SPD = "spd"


class ContestStat(str, Enum):
    COOL = "cool"
    TOUGH = "tough"
    BEAUTY = "beauty"
    SMART = "smart"
    CUTE = "cute"


# Sheet order; each contest stat reads exactly one combat stat
CONTEST_COMBAT_STAT: dict[ContestStat, StatName] = {
    ContestStat.COOL: StatName.ATK,
    ContestStat.TOUGH: StatName.DEF,
    ContestStat.BEAUTY: StatName.SPATK,
    ContestStat.SMART: StatName.SPDEF,
    ContestStat.CUTE: StatName.SPD,
}


class EvasionKind(str, Enum):
    PHYSICAL = "physical"
    SPECIAL = "special"
    SPEED = "speed"


class SkillRank(str, Enum):
    PATHETIC = "pathetic"
    UNTRAINED = "untrained"
    NOVICE = "novice"
    ADEPT = "adept"
    EXPERT = "expert"
    MASTER = "master"


class ActionCategory(str, Enum):
    STATUS = "status"
    PHYSICAL = "physical"
    SPECIAL = "special"


class Frequency(str, Enum):
    AT_WILL = "at-will"
    EOT = "eot"
    SCENE = "scene"
    DAILY = "daily"
    STATIC = "static"


class Fortune(str, Enum):
    """
    How many dice a check draws:
    - NONE: one die
    - KEEP_HIGHER: two dice, the higher counts
    - KEEP_LOWER: two dice, the lower counts
    """

    NONE = "none"
    KEEP_HIGHER = "keep-higher"
    KEEP_LOWER = "keep-lower"


class CheckState(str, Enum):
    CREATED = "created"
    PREPARE_CONTEXTS = "prepare_contexts"
    GATE_CHECKS = "gate_checks"
    PREPARE_MODIFIERS = "prepare_modifiers"
    PREPARE_STATISTIC = "prepare_statistic"
    AWAIT_CONFIRMATION = "await_confirmation"
    BEFORE_ROLL = "before_roll"
    EXECUTE = "execute"
    AFTER_ROLL = "after_roll"
    DONE = "done"
    ABORTED = "aborted"


class AbortReason(str, Enum):
    NO_TARGET = "no-target"
    OUT_OF_RANGE = "out-of-range"
    CANNOT_ATTACK = "cannot-attack"
    FROZEN = "frozen"
    SLEEPING = "sleeping"
    RAGING = "raging"
    DISABLED_MOVE = "disabled-move"
    SUPPRESSED = "suppressed"
    CANCELLED = "cancelled"


class CheckLogResult(str, Enum):
    COMPLETED = "completed"
    ABORTED = "aborted"
    ERROR = "error"


class Condition(str, Enum):
    CANNOT_ATTACK = "cannot-attack"
    FROZEN = "frozen"
    SLEEP = "sleep"
    RAGE = "rage"
    SUPPRESSED = "suppressed"
    CONFUSED = "confused"
    STUCK = "stuck"
    VULNERABLE = "vulnerable"
