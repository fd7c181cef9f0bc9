"""Service layer - battle orchestration and presentation."""

from .battles import BattleOrchestrator, create_trainer_battle, create_wild_battle, generate_battle_id
from .presenter import BattlePresenter, LoggingPresenter

__all__ = [
    "BattleOrchestrator",
    "create_trainer_battle",
    "create_wild_battle",
    "generate_battle_id",
    "BattlePresenter",
    "LoggingPresenter",
]
