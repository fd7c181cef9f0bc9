"""Type definitions for the battle engine."""

from dataclasses import dataclass, field
from typing import Any

from ..models.battle import CombatantKey, EffectDescriptor
from ..models.enums import ActionType


@dataclass(frozen=True)
class Action:
    """A single intent submitted by a player or an AI.

    Actions are transient: the resolver consumes them and only the move log
    keeps a trace.
    """

    type: ActionType
    participant_index: int
    slot_index: int = 0
    move_index: int | None = None  # ATTACK
    target_index: int | None = None  # ATTACK, advisory target team
    switch_to_index: int | None = None  # SWITCH
    item_id: str | None = None  # USE_ITEM

    @property
    def acting_key(self) -> CombatantKey:
        """Key of the combatant performing this action."""
        return CombatantKey(self.participant_index, self.slot_index)

    @classmethod
    def attack(cls, participant_index: int, move_index: int, slot_index: int = 0) -> "Action":
        """Build an attack action."""
        return cls(
            type=ActionType.ATTACK,
            participant_index=participant_index,
            slot_index=slot_index,
            move_index=move_index,
        )

    @classmethod
    def switch(cls, participant_index: int, switch_to_index: int, slot_index: int = 0) -> "Action":
        """Build a switch action."""
        return cls(
            type=ActionType.SWITCH,
            participant_index=participant_index,
            slot_index=slot_index,
            switch_to_index=switch_to_index,
        )

    @classmethod
    def use_item(cls, participant_index: int, item_id: str, slot_index: int = 0) -> "Action":
        """Build an item action."""
        return cls(
            type=ActionType.USE_ITEM,
            participant_index=participant_index,
            slot_index=slot_index,
            item_id=item_id,
        )

    @classmethod
    def forfeit(cls, participant_index: int) -> "Action":
        """Build a forfeit action."""
        return cls(type=ActionType.FORFEIT, participant_index=participant_index)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        data: dict[str, Any] = {
            "type": self.type.value,
            "participant_index": self.participant_index,
            "slot_index": self.slot_index,
        }
        if self.move_index is not None:
            data["move_index"] = self.move_index
        if self.target_index is not None:
            data["target_index"] = self.target_index
        if self.switch_to_index is not None:
            data["switch_to_index"] = self.switch_to_index
        if self.item_id is not None:
            data["item_id"] = self.item_id
        return data


@dataclass
class ActionOutcome:
    """Result of resolving one action.

    ``success`` is False for gameplay-legal failures (fainted actor, bad switch
    target, unimplemented item use); a missed move is still a success.
    """

    success: bool
    message: str
    turn_number: int = 0
    effects: list[EffectDescriptor] = field(default_factory=list)
    battle_ended: bool = False
    winner_id: str | None = None
    is_draw: bool = False

    def add_effect(self, effect: EffectDescriptor) -> None:
        """Add an effect descriptor to the outcome."""
        self.effects.append(effect)
