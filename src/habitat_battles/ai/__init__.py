"""Opponent AI - move scoring and difficulty-based selection."""

from .base import AIDifficulty, AIHandle, AIPersonality, MoveEvaluation, TrainerKind
from .heuristic import BattleAI, GymLeaderAI, TournamentAI, create_ai

__all__ = [
    "AIDifficulty",
    "AIHandle",
    "AIPersonality",
    "MoveEvaluation",
    "TrainerKind",
    "BattleAI",
    "GymLeaderAI",
    "TournamentAI",
    "create_ai",
]
