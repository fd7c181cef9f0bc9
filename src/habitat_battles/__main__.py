"""Entry point for running a demo AI-vs-AI battle."""

import asyncio
import logging
import random
import sys

from habitat_battles.ai.base import AIDifficulty
from habitat_battles.config import get_settings
from habitat_battles.engine.logging import CombatLogger
from habitat_battles.models.battle import Battle, Participant
from habitat_battles.models.creatures import Combatant, HealEffect, Move, PoisonEffect, StatChangeEffect
from habitat_battles.models.enums import BattleKind, EffectTarget, HabitatType, MoveCategory, StatName
from habitat_battles.services.battles import BattleOrchestrator, generate_battle_id
from habitat_battles.services.presenter import LoggingPresenter


def build_demo_teams() -> list[list[Combatant]]:
    """Two small teams with a mix of damaging and status moves."""
    fox = Combatant(
        id="fox-1",
        name="Arctic Fox",
        level=20,
        health=90,
        max_health=90,
        attack=70,
        defense=55,
        speed=85,
        intelligence=60,
        stamina=40,
        types=[HabitatType.ARCTIC],
        moves=[
            Move("Ice Fang", 65, 95, HabitatType.ARCTIC),
            Move("Snow Veil", 0, 100, HabitatType.ARCTIC, MoveCategory.STATUS, effects=[HealEffect(1.0, 25)]),
        ],
    )
    lynx = Combatant(
        id="lynx-1",
        name="Mountain Lynx",
        level=18,
        health=80,
        max_health=80,
        attack=75,
        defense=50,
        speed=95,
        intelligence=45,
        stamina=35,
        types=[HabitatType.MOUNTAIN],
        moves=[Move("Rock Pounce", 70, 90, HabitatType.MOUNTAIN)],
    )
    frog = Combatant(
        id="frog-1",
        name="Dart Frog",
        level=19,
        health=70,
        max_health=70,
        attack=50,
        defense=45,
        speed=90,
        intelligence=75,
        stamina=50,
        types=[HabitatType.JUNGLE],
        moves=[
            Move(
                "Toxic Skin",
                40,
                100,
                HabitatType.JUNGLE,
                MoveCategory.SPECIAL,
                effects=[PoisonEffect(0.5)],
            ),
            Move("Croak", 0, 100, HabitatType.JUNGLE, MoveCategory.STATUS, effects=[StatChangeEffect(1.0, -5)]),
        ],
    )
    camel = Combatant(
        id="camel-1",
        name="Desert Camel",
        level=21,
        health=110,
        max_health=110,
        attack=65,
        defense=70,
        speed=40,
        intelligence=50,
        stamina=60,
        types=[HabitatType.DESERT],
        moves=[
            Move("Sand Kick", 60, 100, HabitatType.DESERT),
            Move(
                "Hump Guard",
                0,
                100,
                HabitatType.DESERT,
                MoveCategory.STATUS,
                effects=[StatChangeEffect(1.0, 10, StatName.DEFENSE, target=EffectTarget.SELF)],
            ),
        ],
    )
    return [[fox, lynx], [frog, camel]]


async def main() -> None:
    """Run one battle between two AI trainers."""
    settings = get_settings()

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    battle = Battle(
        battle_id=generate_battle_id(),
        kind=BattleKind.TRAINER,
        participants=[
            Participant("north", "North Ranger", 0, is_ai=True, ai_difficulty=AIDifficulty.ADVANCED),
            Participant("south", "South Ranger", 1, is_ai=True, ai_difficulty=AIDifficulty.INTERMEDIATE),
        ],
        teams=build_demo_teams(),
    )
    combat_logger = CombatLogger(battle.battle_id)
    orchestrator = BattleOrchestrator(
        battle,
        presenter=LoggingPresenter(),
        settings=settings,
        rng=random.Random(settings.rng_seed),
        logger=combat_logger,
    )

    logging.info("Starting demo battle %s...", battle.battle_id)
    await orchestrator.run()

    if settings.debug:
        print(combat_logger.get_log().format_readable())


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(0)
