"""Battle data model."""

from .battle import (
    Battle,
    BattleResult,
    BattleSettings,
    CombatantKey,
    EffectDescriptor,
    MoveRecord,
    Participant,
    WeatherCondition,
    WeatherEffect,
)
from .creatures import (
    MAX_MOVES,
    BurnEffect,
    Combatant,
    HealEffect,
    Move,
    MoveEffect,
    PoisonEffect,
    StatChangeEffect,
)
from .enums import (
    ActionType,
    BattleFormat,
    BattleKind,
    BattleState,
    EffectDescriptorType,
    EffectTarget,
    HabitatType,
    MoveCategory,
    StatName,
    StatusType,
)
from .replay import BattleReplay, build_replay
from .validators import BattleValidator, ValidationResult, validate_battle

__all__ = [
    # Battle aggregate
    "Battle",
    "BattleResult",
    "BattleSettings",
    "CombatantKey",
    "EffectDescriptor",
    "MoveRecord",
    "Participant",
    "WeatherCondition",
    "WeatherEffect",
    # Creatures
    "MAX_MOVES",
    "Combatant",
    "Move",
    "MoveEffect",
    "PoisonEffect",
    "BurnEffect",
    "HealEffect",
    "StatChangeEffect",
    # Enums
    "ActionType",
    "BattleFormat",
    "BattleKind",
    "BattleState",
    "EffectDescriptorType",
    "EffectTarget",
    "HabitatType",
    "MoveCategory",
    "StatName",
    "StatusType",
    # Replay / validation
    "BattleReplay",
    "build_replay",
    "BattleValidator",
    "ValidationResult",
    "validate_battle",
]
