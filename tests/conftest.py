"""Shared builders for battle tests."""

import random

import pytest

from habitat_battles.config import Settings
from habitat_battles.models.battle import Battle, BattleSettings, Participant
from habitat_battles.models.creatures import Combatant, Move
from habitat_battles.models.enums import BattleKind, HabitatType, MoveCategory


class ScriptedRandom(random.Random):
    """Random source that replays fixed draws.

    ``random()`` pops from the script and falls back to ``default`` once it
    runs out (0.99: always hits, never crits, only certain effects fire).
    ``uniform()`` always returns ``uniform_value`` so damage is predictable.
    """

    def __init__(self, values=(), uniform_value: float = 1.0, default: float = 0.99) -> None:
        super().__init__(0)
        self.values = list(values)
        self.uniform_value = uniform_value
        self.default = default

    def random(self) -> float:
        if self.values:
            return self.values.pop(0)
        return self.default

    def uniform(self, a: float, b: float) -> float:
        return self.uniform_value


def build_move(
    name: str = "Tackle",
    power: int = 60,
    accuracy: int = 100,
    type: HabitatType = HabitatType.GRASSLAND,
    category: MoveCategory = MoveCategory.PHYSICAL,
    energy_cost: int = 0,
    effects=None,
) -> Move:
    return Move(
        name=name,
        power=power,
        accuracy=accuracy,
        type=type,
        category=category,
        energy_cost=energy_cost,
        effects=list(effects or []),
    )


def build_combatant(
    id: str = "c-1",
    name: str = "Badger",
    level: int = 20,
    health: int = 100,
    max_health: int = 100,
    attack: int = 80,
    defense: int = 50,
    speed: int = 50,
    intelligence: int = 50,
    stamina: int = 50,
    types=None,
    moves=None,
) -> Combatant:
    return Combatant(
        id=id,
        name=name,
        level=level,
        health=health,
        max_health=max_health,
        attack=attack,
        defense=defense,
        speed=speed,
        intelligence=intelligence,
        stamina=stamina,
        types=list(types) if types is not None else [HabitatType.GRASSLAND],
        moves=list(moves) if moves is not None else [build_move()],
    )


def build_battle(
    teams: list[list[Combatant]] | None = None,
    kind: BattleKind = BattleKind.TRAINER,
    ai: tuple[bool, ...] = (False, False),
    settings: BattleSettings | None = None,
) -> Battle:
    if teams is None:
        teams = [
            [build_combatant(id="a-0", name="Badger")],
            [build_combatant(id="b-0", name="Heron")],
        ]
    participants = [
        Participant(
            trainer_id=f"trainer-{index}",
            trainer_name=f"Trainer {index}",
            team_index=index,
            is_ai=ai[index] if index < len(ai) else False,
            ai_difficulty=1 if index < len(ai) and ai[index] else None,
        )
        for index in range(len(teams))
    ]
    return Battle(
        battle_id="battle-test",
        kind=kind,
        participants=participants,
        teams=teams,
        settings=settings or BattleSettings(),
    )


@pytest.fixture
def make_move():
    """Factory for moves."""
    return build_move


@pytest.fixture
def make_combatant():
    """Factory for combatants."""
    return build_combatant


@pytest.fixture
def make_battle():
    """Factory for two-sided battles."""
    return build_battle


@pytest.fixture
def scripted_rng():
    """Factory for scripted random sources."""
    return ScriptedRandom


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment, with no AI delays."""
    return Settings(_env_file=None, ai_base_thinking_ms=0, ai_thinking_ms_per_difficulty=0, rng_seed=7)
