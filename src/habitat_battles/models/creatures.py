"""Creature-side models: combatants, moves and move effects."""

from dataclasses import dataclass, field

from .enums import EffectTarget, HabitatType, MoveCategory, StatName

MAX_MOVES = 4


@dataclass(frozen=True)
class PoisonEffect:
    """Chance to poison the target for a few turns."""

    chance: float
    magnitude: int = 0  # Unused, tick damage is derived from target max health
    target: EffectTarget = EffectTarget.OPPONENT


@dataclass(frozen=True)
class BurnEffect:
    """Chance to burn the target for a few turns."""

    chance: float
    magnitude: int = 0
    target: EffectTarget = EffectTarget.OPPONENT


@dataclass(frozen=True)
class HealEffect:
    """Chance to restore a percentage of the attacker's max health."""

    chance: float
    magnitude: int  # Percent of max health
    target: EffectTarget = EffectTarget.SELF


@dataclass(frozen=True)
class StatChangeEffect:
    """Chance to raise or lower one stat by a flat amount."""

    chance: float
    magnitude: int  # Signed delta
    stat: StatName = StatName.ATTACK
    target: EffectTarget = EffectTarget.OPPONENT


MoveEffect = PoisonEffect | BurnEffect | HealEffect | StatChangeEffect


@dataclass
class Move:
    """A move a combatant knows."""

    name: str
    power: int
    accuracy: int  # 0-100
    type: HabitatType
    category: MoveCategory = MoveCategory.PHYSICAL
    energy_cost: int = 0
    effects: list[MoveEffect] = field(default_factory=list)


@dataclass
class Combatant:
    """A creature projected into a battle.

    Mutable during the battle; health is always kept inside [0, max_health].
    """

    id: str
    name: str
    level: int
    health: int
    max_health: int
    attack: int
    defense: int
    speed: int
    intelligence: int
    stamina: int
    types: list[HabitatType] = field(default_factory=list)
    moves: list[Move] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.moves) > MAX_MOVES:
            raise ValueError(f"{self.name} knows {len(self.moves)} moves, max is {MAX_MOVES}")
        if self.max_health <= 0:
            raise ValueError(f"{self.name} must have positive max health")
        self.health = max(0, min(self.health, self.max_health))

    def is_alive(self) -> bool:
        """Check if the combatant can still battle."""
        return self.health > 0

    def is_fainted(self) -> bool:
        """Check if the combatant has no health left."""
        return self.health <= 0

    def apply_damage(self, amount: int) -> int:
        """Apply damage. Returns actual health lost."""
        actual = min(self.health, max(0, amount))
        self.health -= actual
        return actual

    def apply_heal(self, amount: int) -> int:
        """Apply healing. Returns actual health restored."""
        actual = min(self.max_health - self.health, max(0, amount))
        self.health += actual
        return actual

    def modify_stat(self, stat: StatName, delta: int) -> int:
        """Shift a stat by delta, never dropping below 1. Returns the applied change."""
        current = getattr(self, stat.value)
        new_value = max(1, current + delta)
        setattr(self, stat.value, new_value)
        return new_value - current

    def learn_move(self, move: Move) -> None:
        """Add a move, respecting the move cap."""
        if len(self.moves) >= MAX_MOVES:
            raise ValueError(f"{self.name} already knows {MAX_MOVES} moves")
        self.moves.append(move)

    def get_move(self, index: int | None) -> Move | None:
        """Get a move by slot, or None if the slot is empty."""
        if index is None or index < 0 or index >= len(self.moves):
            return None
        return self.moves[index]
