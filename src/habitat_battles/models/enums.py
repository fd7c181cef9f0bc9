"""Enums for battle models."""

from enum import Enum


class BattleKind(str, Enum):
    """What kind of encounter a battle is."""

    WILD = "wild"
    TRAINER = "trainer"
    GYM = "gym"
    TOURNAMENT = "tournament"
    RAID = "raid"


class BattleState(str, Enum):
    """Lifecycle state of a battle."""

    WAITING = "waiting"  # Participants still readying up
    IN_PROGRESS = "in_progress"  # Actions are being resolved
    ENDED = "ended"  # Terminal, battle is read-only


class BattleFormat(str, Enum):
    """How many combatants per side are active at once."""

    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    ROTATION = "rotation"
    RAID = "raid"


class ActionType(str, Enum):
    """Type of action a participant can submit."""

    ATTACK = "attack"  # Use one of the acting combatant's moves
    SWITCH = "switch"  # Swap the acting slot with another slot on the same team
    USE_ITEM = "use_item"  # Not implemented yet
    FORFEIT = "forfeit"  # Concede the battle


class MoveCategory(str, Enum):
    """Which stats a move uses for damage."""

    PHYSICAL = "physical"  # attack vs defense
    SPECIAL = "special"  # intelligence vs intelligence
    STATUS = "status"


class HabitatType(str, Enum):
    """Habitat tags used for type effectiveness."""

    FOREST = "forest"
    OCEAN = "ocean"
    DESERT = "desert"
    ARCTIC = "arctic"
    JUNGLE = "jungle"
    SAVANNA = "savanna"
    MOUNTAIN = "mountain"
    GRASSLAND = "grassland"


class EffectTarget(str, Enum):
    """Who a move effect applies to."""

    SELF = "self"
    OPPONENT = "opponent"
    FIELD = "field"


class StatusType(str, Enum):
    """Timed periodic conditions tracked by the status ledger."""

    POISON = "poison"
    BURN = "burn"


class EffectDescriptorType(str, Enum):
    """Kinds of effect descriptors relayed to the presentation layer."""

    DAMAGE = "damage"
    HEAL = "heal"
    STATUS = "status"
    STAT_CHANGE = "stat_change"


class StatName(str, Enum):
    """Combatant stats that stat-change effects can modify."""

    ATTACK = "attack"
    DEFENSE = "defense"
    SPEED = "speed"
    INTELLIGENCE = "intelligence"
    STAMINA = "stamina"
