"""Heuristic opponents - score every move, then pick according to difficulty."""

import logging
import random
from collections import Counter, deque

from ..engine.combat_math import get_type_effectiveness
from ..engine.types import Action
from ..models.battle import Battle
from ..models.creatures import BurnEffect, Combatant, HealEffect, Move, PoisonEffect, StatChangeEffect
from ..models.enums import ActionType, HabitatType
from .base import AIDifficulty, AIHandle, AIPersonality, MoveEvaluation, TrainerKind

log = logging.getLogger("habitat_battles.ai")

# Base score weights
POWER_WEIGHT = 0.5
ACCURACY_WEIGHT = 20
EFFECTIVENESS_WEIGHT = 30

FINISHING_THRESHOLD = 0.3
FINISHING_BONUS = 25
INSUFFICIENT_STAMINA_PENALTY = 50

GYM_SPECIALTY_BONUS = 15
GYM_SUPER_EFFECTIVE_BONUS = 10

PATTERN_MEMORY = 10
PATTERN_MIN_SAMPLES = 3
COUNTER_BONUS = 5


class BattleAI:
    """Default opponent: rates each known move and picks per difficulty."""

    def __init__(
        self,
        battle: Battle,
        participant_index: int,
        difficulty: AIDifficulty = AIDifficulty.INTERMEDIATE,
        personality: AIPersonality = AIPersonality.BALANCED,
        rng: random.Random | None = None,
    ) -> None:
        self.battle = battle
        self.participant_index = participant_index
        self.difficulty = difficulty
        self.personality = personality
        self.rng = rng or random.Random()

    def update_state(self, battle: Battle) -> None:
        """Point the AI at the latest battle state."""
        self.battle = battle

    def get_best_action(self) -> Action:
        """Decide what the lead combatant does this turn.

        A fainted lead is replaced by the first healthy bench slot. With no
        healthy slot left, or nothing to use, the AI forfeits.

        Returns:
            Action for this AI's participant
        """
        team = self.battle.teams[self.participant_index]
        lead = team[0]

        if lead.is_fainted():
            return self._switch_action()

        evaluations = self.evaluate_all_moves(lead)
        if not evaluations:
            return Action.forfeit(self.participant_index)

        chosen = self._select_by_difficulty(evaluations)
        log.debug(
            "Participant %d picks %s (score %.1f: %s)",
            self.participant_index,
            chosen.move.name,
            chosen.score,
            "; ".join(chosen.reasoning),
        )
        return Action(
            type=ActionType.ATTACK,
            participant_index=self.participant_index,
            slot_index=0,
            move_index=chosen.move_index,
            target_index=self.battle.opponent_index(self.participant_index),
        )

    def describe(self) -> str:
        """Short label for display while the AI is thinking."""
        return f"AI ({self.personality.value}, Lv.{int(self.difficulty)}) is thinking..."

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def _opponent_lead(self) -> Combatant:
        opponent_index = self.battle.opponent_index(self.participant_index)
        slot = self.battle.first_alive_slot(opponent_index)
        return self.battle.teams[opponent_index][slot or 0]

    def evaluate_all_moves(self, attacker: Combatant) -> list[MoveEvaluation]:
        """Score every move the attacker knows, best first."""
        defender = self._opponent_lead()
        evaluations = [
            self.evaluate_move(move, index, attacker, defender) for index, move in enumerate(attacker.moves)
        ]
        evaluations.sort(key=lambda e: e.score, reverse=True)
        return evaluations

    def evaluate_move(self, move: Move, move_index: int, attacker: Combatant, defender: Combatant) -> MoveEvaluation:
        """Score a single move against the defender.

        Args:
            move: Candidate move
            move_index: Index of the move in the attacker's list
            attacker: Combatant that would use the move
            defender: Combatant that would receive it

        Returns:
            MoveEvaluation, score floored at 0
        """
        reasoning = [f"Power: {move.power}", f"Accuracy: {move.accuracy}%"]
        score = move.power * POWER_WEIGHT
        score += move.accuracy / 100 * ACCURACY_WEIGHT

        effectiveness = get_type_effectiveness(move.type, defender.types)
        score += effectiveness * EFFECTIVENESS_WEIGHT
        if effectiveness > 1:
            reasoning.append("Super effective")
        elif effectiveness < 1:
            reasoning.append("Not very effective")

        if defender.health / defender.max_health < FINISHING_THRESHOLD and move.power > 0:
            score += FINISHING_BONUS
            reasoning.append("Finishing move")

        score += self._personality_modifier(move, defender)

        if move.power == 0:
            score += self._status_move_value(move, attacker, defender)

        if attacker.stamina < move.energy_cost:
            score -= INSUFFICIENT_STAMINA_PENALTY
            reasoning.append("Insufficient energy")

        return MoveEvaluation(move=move, move_index=move_index, score=max(0.0, score), reasoning=reasoning)

    def _personality_modifier(self, move: Move, defender: Combatant) -> float:
        match self.personality:
            case AIPersonality.AGGRESSIVE:
                modifier = 0.0
                if move.power > 80:
                    modifier += 20
                if move.power == 0:
                    modifier -= 15
                return modifier
            case AIPersonality.DEFENSIVE:
                modifier = 0.0
                if move.power == 0:
                    modifier += 15
                if any(isinstance(effect, HealEffect) for effect in move.effects):
                    modifier += 25
                return modifier
            case AIPersonality.STRATEGIC:
                modifier = 15.0 if move.effects else 0.0
                if get_type_effectiveness(move.type, defender.types) > 1:
                    modifier += 10
                return modifier
            case AIPersonality.UNPREDICTABLE:
                return (self.rng.random() - 0.5) * 30
            case _:
                return 0.0

    def _status_move_value(self, move: Move, attacker: Combatant, defender: Combatant) -> float:
        value = 0.0
        for effect in move.effects:
            match effect:
                case HealEffect():
                    if attacker.health / attacker.max_health < 0.5:
                        value += 30
                case StatChangeEffect(magnitude=magnitude) if magnitude >= 0:
                    value += 20
                case StatChangeEffect():
                    value += 15
                case PoisonEffect() | BurnEffect():
                    if defender.health > defender.max_health * 0.5:
                        value += 25
        return value

    def _select_by_difficulty(self, evaluations: list[MoveEvaluation]) -> MoveEvaluation:
        """Pick a move from the sorted evaluations."""
        best = evaluations[0]
        match self.difficulty:
            case AIDifficulty.NOVICE:
                if self.rng.random() < 0.6:
                    return best
                return self.rng.choice(evaluations)
            case AIDifficulty.INTERMEDIATE:
                if self.rng.random() < 0.8:
                    return self.rng.choice(evaluations[:2])
                return self.rng.choice(evaluations)
            case AIDifficulty.ADVANCED:
                if self.rng.random() < 0.9:
                    return best
                return self.rng.choice(evaluations[:3])
            case AIDifficulty.EXPERT:
                if self.rng.random() < 0.95 or len(evaluations) < 2:
                    return best
                return evaluations[1]
            case _:
                return best

    def _switch_action(self) -> Action:
        team = self.battle.teams[self.participant_index]
        for slot in range(1, len(team)):
            if team[slot].is_alive():
                return Action.switch(self.participant_index, slot)
        return Action.forfeit(self.participant_index)


class GymLeaderAI(BattleAI):
    """Expert strategist that favours its gym's habitat."""

    def __init__(
        self,
        battle: Battle,
        participant_index: int,
        gym_type: HabitatType = HabitatType.FOREST,
        gym_level: int = 1,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(battle, participant_index, AIDifficulty.EXPERT, AIPersonality.STRATEGIC, rng)
        self.gym_type = gym_type
        self.gym_level = gym_level

    def evaluate_move(self, move: Move, move_index: int, attacker: Combatant, defender: Combatant) -> MoveEvaluation:
        evaluation = super().evaluate_move(move, move_index, attacker, defender)
        if move.type == self.gym_type:
            evaluation.score += GYM_SPECIALTY_BONUS
            evaluation.reasoning.append("Gym specialty")
        if get_type_effectiveness(move.type, defender.types) > 1:
            evaluation.score += GYM_SUPER_EFFECTIVE_BONUS
        return evaluation


class TournamentAI(BattleAI):
    """Strategist that tracks the opponent's recent move choices."""

    def __init__(
        self,
        battle: Battle,
        participant_index: int,
        difficulty: AIDifficulty = AIDifficulty.ADVANCED,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(battle, participant_index, difficulty, AIPersonality.STRATEGIC, rng)
        self.opponent_patterns: dict[str, deque[int]] = {}

    def _opponent_id(self) -> str:
        return self.battle.participants[self.battle.opponent_index(self.participant_index)].trainer_id

    def learn_from_opponent(self, action: Action) -> None:
        """Remember the opponent's attack choices (last few only)."""
        if action.type != ActionType.ATTACK or action.move_index is None:
            return
        patterns = self.opponent_patterns.setdefault(self._opponent_id(), deque(maxlen=PATTERN_MEMORY))
        patterns.append(action.move_index)

    def predict_opponent_move(self) -> int | None:
        """Most frequent recent opponent move, once enough samples exist."""
        patterns = self.opponent_patterns.get(self._opponent_id())
        if not patterns or len(patterns) < PATTERN_MIN_SAMPLES:
            return None
        return Counter(patterns).most_common(1)[0][0]

    def evaluate_move(self, move: Move, move_index: int, attacker: Combatant, defender: Combatant) -> MoveEvaluation:
        evaluation = super().evaluate_move(move, move_index, attacker, defender)
        if self.predict_opponent_move() is not None and move.power > 0:
            evaluation.score += COUNTER_BONUS
            evaluation.reasoning.append("Counter prediction")
        return evaluation


def create_ai(
    battle: Battle,
    participant_index: int,
    trainer_kind: TrainerKind = TrainerKind.TRAINER,
    difficulty: int = AIDifficulty.INTERMEDIATE,
    rng: random.Random | None = None,
    gym_type: HabitatType | None = None,
    personality: AIPersonality = AIPersonality.BALANCED,
) -> AIHandle:
    """Build the opponent brain for a participant.

    Args:
        battle: Battle the AI plays in
        participant_index: Which participant it controls
        trainer_kind: Kind of opponent
        difficulty: 1-5, ignored by kinds with a fixed difficulty
        rng: Random source for choices
        gym_type: Habitat specialty for gym leaders
        personality: Personality for plain trainers

    Returns:
        An AIHandle
    """
    level = AIDifficulty(min(max(int(difficulty), AIDifficulty.NOVICE), AIDifficulty.MASTER))

    match TrainerKind(trainer_kind):
        case TrainerKind.WILD:
            return BattleAI(battle, participant_index, AIDifficulty.NOVICE, AIPersonality.UNPREDICTABLE, rng)
        case TrainerKind.GYM:
            return GymLeaderAI(battle, participant_index, gym_type or HabitatType.FOREST, rng=rng)
        case TrainerKind.TOURNAMENT:
            return TournamentAI(battle, participant_index, level, rng)
        case TrainerKind.ELITE:
            return BattleAI(battle, participant_index, AIDifficulty.MASTER, AIPersonality.STRATEGIC, rng)
        case _:
            return BattleAI(battle, participant_index, level, personality, rng)
