"""Presentation boundary - how the orchestrator shows battle progress."""

import logging
from typing import Protocol, runtime_checkable

from ..models.battle import Battle, BattleResult, EffectDescriptor

log = logging.getLogger("habitat_battles.services")


@runtime_checkable
class BattlePresenter(Protocol):
    """Sink for battle messages, effect animations, and the final result."""

    def show_message(self, text: str) -> None: ...

    async def play_effect(self, effect: EffectDescriptor, source: str) -> None: ...

    def show_result(self, result: BattleResult, battle: Battle) -> None: ...


def effect_side(effect: EffectDescriptor, viewer_index: int = 0) -> str:
    """Which side of the screen an effect lands on, from the viewer's seat."""
    return "player" if effect.target.team == viewer_index else "opponent"


class LoggingPresenter:
    """Presenter that writes everything to the standard logger."""

    def __init__(self, viewer_index: int = 0, logger: logging.Logger | None = None) -> None:
        self.viewer_index = viewer_index
        self.log = logger or log
        self.messages: list[str] = []

    def show_message(self, text: str) -> None:
        self.messages.append(text)
        self.log.info(text)

    async def play_effect(self, effect: EffectDescriptor, source: str) -> None:
        self.log.info(
            "[%s -> %s] %s %s: %s",
            source,
            effect_side(effect, self.viewer_index),
            effect.type.value,
            effect.value,
            effect.message,
        )

    def show_result(self, result: BattleResult, battle: Battle) -> None:
        if result.is_draw:
            self.show_message("The battle ended in a draw!")
            return

        viewer = battle.participants[self.viewer_index]
        if result.winner_id == viewer.trainer_id:
            experience = result.experience_gained.get(viewer.trainer_id, 0)
            self.show_message(f"{viewer.trainer_name} won! Gained {experience} experience.")
        else:
            self.show_message(f"{viewer.trainer_name} was defeated.")
