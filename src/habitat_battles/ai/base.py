"""AI collaborator boundary - what the orchestrator needs from an opponent brain."""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Protocol, runtime_checkable

from ..engine.types import Action
from ..models.battle import Battle
from ..models.creatures import Move


class AIDifficulty(IntEnum):
    """How often the AI picks its best-scored move."""

    NOVICE = 1
    INTERMEDIATE = 2
    ADVANCED = 3
    EXPERT = 4
    MASTER = 5


class AIPersonality(str, Enum):
    """Bias applied on top of the base move score."""

    AGGRESSIVE = "aggressive"  # Big hits, avoids status moves
    DEFENSIVE = "defensive"  # Status and healing moves
    BALANCED = "balanced"
    STRATEGIC = "strategic"  # Secondary effects and type advantage
    UNPREDICTABLE = "unpredictable"  # Random noise on every score


class TrainerKind(str, Enum):
    """Which kind of opponent to build."""

    WILD = "wild"
    TRAINER = "trainer"
    GYM = "gym"
    TOURNAMENT = "tournament"
    ELITE = "elite"


@dataclass
class MoveEvaluation:
    """Score of one candidate move."""

    move: Move
    move_index: int
    score: float
    reasoning: list[str]


@runtime_checkable
class AIHandle(Protocol):
    """Opponent brain driven by the orchestrator.

    Implementations may also define ``learn_from_opponent(action)``; the
    orchestrator calls it when present.
    """

    def update_state(self, battle: Battle) -> None: ...

    def get_best_action(self) -> Action: ...
