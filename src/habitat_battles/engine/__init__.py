"""Combat resolution engine - damage math, status ticks, action resolution, and termination."""

from .combat_math import calculate_damage, get_type_effectiveness, roll_accuracy, roll_critical
from .logging import CombatLog, CombatLogger, LogEntry, LogEventType, StateSnapshot
from .resolver import ActionResolver
from .status import StatusEffect, StatusLedger, StatusTick
from .termination import TerminationCheck, TerminationDetector
from .turn_order import TurnOrderScheduler
from .types import Action, ActionOutcome

__all__ = [
    "calculate_damage",
    "get_type_effectiveness",
    "roll_accuracy",
    "roll_critical",
    "StatusEffect",
    "StatusLedger",
    "StatusTick",
    "TurnOrderScheduler",
    "TerminationCheck",
    "TerminationDetector",
    "ActionResolver",
    "Action",
    "ActionOutcome",
    "CombatLogger",
    "CombatLog",
    "LogEntry",
    "LogEventType",
    "StateSnapshot",
]
