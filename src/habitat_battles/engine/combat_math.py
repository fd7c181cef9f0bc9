"""Combat math - pure damage, effectiveness and probability rolls.

Every function that involves chance takes the RNG explicitly so that a seeded
``random.Random`` reproduces a battle bit-for-bit.
"""

import math
import random

from ..models.battle import WeatherCondition
from ..models.creatures import Combatant, Move
from ..models.enums import HabitatType, MoveCategory

CRITICAL_BASE_CHANCE = 1 / 16
CRITICAL_SPEED_THRESHOLD = 100
CRITICAL_SPEED_BONUS = 0.01
CRITICAL_MULTIPLIER = 1.5
RANDOM_FACTOR_MIN = 0.85
RANDOM_FACTOR_MAX = 1.0

# Attacking habitat -> defending habitat -> multiplier. Not reciprocal.
TYPE_CHART: dict[HabitatType, dict[HabitatType, float]] = {
    HabitatType.FOREST: {HabitatType.OCEAN: 2.0, HabitatType.DESERT: 0.5, HabitatType.ARCTIC: 0.5},
    HabitatType.OCEAN: {HabitatType.DESERT: 2.0, HabitatType.MOUNTAIN: 2.0, HabitatType.FOREST: 0.5},
    HabitatType.DESERT: {HabitatType.FOREST: 2.0, HabitatType.ARCTIC: 0.5, HabitatType.OCEAN: 0.5},
    HabitatType.ARCTIC: {HabitatType.FOREST: 2.0, HabitatType.MOUNTAIN: 2.0, HabitatType.DESERT: 0.5},
    HabitatType.JUNGLE: {HabitatType.DESERT: 2.0, HabitatType.ARCTIC: 0.5},
    HabitatType.SAVANNA: {HabitatType.FOREST: 2.0, HabitatType.JUNGLE: 0.5},
    HabitatType.MOUNTAIN: {HabitatType.FOREST: 2.0, HabitatType.OCEAN: 0.5},
    HabitatType.GRASSLAND: {HabitatType.DESERT: 2.0, HabitatType.MOUNTAIN: 0.5},
}


def get_type_effectiveness(move_type: HabitatType, defending_types: list[HabitatType]) -> float:
    """Multiply the chart entry for every defending tag the move type has a relation to.

    Args:
        move_type: Habitat tag of the attacking move
        defending_types: Habitat tags of the defender

    Returns:
        Combined multiplier, 1.0 when no relation is defined
    """
    chart = TYPE_CHART.get(move_type, {})
    total = 1.0
    for defending_type in defending_types:
        total *= chart.get(defending_type, 1.0)
    return total


def attack_and_defense(attacker: Combatant, defender: Combatant, move: Move) -> tuple[int, int]:
    """Pick the stats a move's category pits against each other."""
    if move.category == MoveCategory.PHYSICAL:
        return attacker.attack, defender.defense
    return attacker.intelligence, defender.intelligence


def base_damage(level: int, power: int, attack: int, defense: int) -> float:
    """Level/power/stat part of the damage formula, before multipliers."""
    return (2 * level / 5 + 2) * power * attack / max(1, defense) / 50 + 2


def roll_random_factor(rng: random.Random) -> float:
    """Draw the damage spread factor uniformly from [0.85, 1.00]."""
    return rng.uniform(RANDOM_FACTOR_MIN, RANDOM_FACTOR_MAX)


def calculate_damage(
    attacker: Combatant,
    defender: Combatant,
    move: Move,
    effectiveness: float,
    critical: bool,
    rng: random.Random,
    weather: WeatherCondition | None = None,
) -> int:
    """Compute the damage of a hit.

    damage = floor(base * effectiveness * crit * weather * randomFactor), at least 1.

    Args:
        attacker: Combatant using the move
        defender: Combatant being hit
        move: Move being used
        effectiveness: Type effectiveness multiplier
        critical: Whether the hit is critical (x1.5)
        rng: Random source for the spread factor
        weather: Optional field weather

    Returns:
        Damage dealt, never below 1
    """
    attack, defense = attack_and_defense(attacker, defender, move)
    damage = base_damage(attacker.level, move.power, attack, defense)
    damage *= effectiveness
    if critical:
        damage *= CRITICAL_MULTIPLIER
    if weather is not None:
        damage *= weather.multiplier_for(move.type)
    damage *= roll_random_factor(rng)
    return max(1, math.floor(damage))


def critical_chance(attacker: Combatant) -> float:
    """Probability that the attacker lands a critical hit."""
    chance = CRITICAL_BASE_CHANCE
    if attacker.speed > CRITICAL_SPEED_THRESHOLD:
        chance += CRITICAL_SPEED_BONUS
    return chance


def roll_critical(attacker: Combatant, rng: random.Random) -> bool:
    """Bernoulli draw for a critical hit."""
    return rng.random() < critical_chance(attacker)


def roll_accuracy(move: Move, rng: random.Random) -> bool:
    """Bernoulli draw for whether a move hits."""
    return rng.random() < move.accuracy / 100


def roll_chance(chance: float, rng: random.Random) -> bool:
    """Bernoulli draw for a secondary move effect."""
    return rng.random() < chance
