"""Battle aggregate and the records it owns."""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, NamedTuple

from ..errors import InvalidParticipantError, InvalidSlotError, InvalidStateError
from .creatures import Combatant, Move
from .enums import BattleFormat, BattleKind, BattleState, EffectDescriptorType, HabitatType


class CombatantKey(NamedTuple):
    """Position of a combatant: (team index, slot index)."""

    team: int
    slot: int

    def __str__(self) -> str:
        return f"{self.team}-{self.slot}"


@dataclass(frozen=True)
class WeatherEffect:
    """Damage multiplier for moves of the affected habitat types."""

    multiplier: float
    affected_types: tuple[HabitatType, ...]


@dataclass(frozen=True)
class WeatherCondition:
    """Field weather carried in the battle settings."""

    name: str
    effects: tuple[WeatherEffect, ...] = ()

    def multiplier_for(self, move_type: HabitatType) -> float:
        """Multiplier of the first weather effect touching the move type."""
        for effect in self.effects:
            if move_type in effect.affected_types:
                return effect.multiplier
        return 1.0


@dataclass(frozen=True)
class BattleSettings:
    """Immutable rules for a single battle."""

    max_team_size: int = 6
    turn_time_limit: int = 30
    allow_items: bool = True
    allow_switching: bool = True
    format: BattleFormat = BattleFormat.SINGLE
    weather: WeatherCondition | None = None


@dataclass
class Participant:
    """One side of a battle."""

    trainer_id: str
    trainer_name: str
    team_index: int
    is_ai: bool = False
    ai_difficulty: int | None = None
    is_ready: bool = True


@dataclass(frozen=True)
class EffectDescriptor:
    """One observable consequence of an action, relayed to the presentation layer."""

    type: EffectDescriptorType
    target: CombatantKey
    value: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type.value,
            "target": str(self.target),
            "value": self.value,
            "message": self.message,
        }


@dataclass
class MoveRecord:
    """A resolved hit, kept in the battle's chronological move log."""

    turn_number: int
    participant_index: int
    slot_index: int
    move: Move
    target: CombatantKey
    damage: int
    effectiveness: float
    critical: bool
    effects: list[EffectDescriptor] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class BattleResult:
    """Terminal snapshot of a finished battle."""

    is_draw: bool
    winner_id: str | None = None
    loser_id: str | None = None
    experience_gained: dict[str, int] = field(default_factory=dict)
    currency_won: dict[str, int] = field(default_factory=dict)
    items_won: dict[str, list[str]] = field(default_factory=dict)
    achievements: list[str] = field(default_factory=list)


@dataclass
class Battle:
    """Root aggregate for one match.

    Teams are fixed-size slot arrays index-aligned with participants. The
    battle is mutated in place by the resolver and becomes read-only once it
    reaches ENDED.
    """

    battle_id: str
    kind: BattleKind
    participants: list[Participant]
    teams: list[list[Combatant]]
    settings: BattleSettings = field(default_factory=BattleSettings)
    state: BattleState = BattleState.IN_PROGRESS
    current_turn: int = 1
    move_log: list[MoveRecord] = field(default_factory=list)
    result: BattleResult | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    started_at: datetime | None = None
    ended_at: datetime | None = None
    initial_teams: list[list[Combatant]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.initial_teams:
            self.initial_teams = copy.deepcopy(self.teams)
        if self.state == BattleState.IN_PROGRESS and self.started_at is None:
            self.started_at = self.created_at

    @property
    def is_over(self) -> bool:
        """Check if the battle has ended."""
        return self.state == BattleState.ENDED

    def mark_ready(self, participant_index: int, ready: bool = True) -> None:
        """Toggle a participant's readiness. Only allowed before the battle starts."""
        if self.state != BattleState.WAITING:
            raise InvalidStateError(f"Battle is {self.state.value}, readiness is locked")
        self.get_participant(participant_index).is_ready = ready

    def start(self) -> None:
        """Move a waiting battle into progress once every participant is ready."""
        if self.state != BattleState.WAITING:
            raise InvalidStateError(f"Battle is {self.state.value}, cannot start")
        if not all(p.is_ready for p in self.participants):
            raise InvalidStateError("Not all participants are ready")
        self.state = BattleState.IN_PROGRESS
        self.started_at = datetime.now(timezone.utc)

    def end(self, result: BattleResult) -> None:
        """Transition to ENDED. Happens exactly once."""
        if self.state == BattleState.ENDED:
            raise InvalidStateError("Battle has already ended")
        self.state = BattleState.ENDED
        self.result = result
        self.ended_at = datetime.now(timezone.utc)

    def get_participant(self, index: int) -> Participant:
        """Get a participant by index."""
        if index < 0 or index >= len(self.participants):
            raise InvalidParticipantError(f"Invalid participant index: {index}")
        return self.participants[index]

    def get_combatant(self, key: CombatantKey) -> Combatant:
        """Get the combatant occupying a slot."""
        if key.team < 0 or key.team >= len(self.teams):
            raise InvalidSlotError(f"Invalid team index: {key.team}")
        team = self.teams[key.team]
        if key.slot < 0 or key.slot >= len(team):
            raise InvalidSlotError(f"Invalid slot {key.slot} for team {key.team}")
        return team[key.slot]

    def opponent_index(self, participant_index: int) -> int:
        """Index of the participant opposing the given one."""
        return (participant_index + 1) % len(self.participants)

    def team_alive(self, team_index: int) -> bool:
        """Check if any combatant on a team still has health."""
        return any(c.is_alive() for c in self.teams[team_index])

    def first_alive_slot(self, team_index: int) -> int | None:
        """Slot index of the first living combatant on a team."""
        for slot, combatant in enumerate(self.teams[team_index]):
            if combatant.is_alive():
                return slot
        return None

    def iter_keys(self):
        """Yield every (team, slot) key in the battle."""
        for team_index, team in enumerate(self.teams):
            for slot_index in range(len(team)):
                yield CombatantKey(team_index, slot_index)

    def get_state(self) -> dict[str, Any]:
        """Get a display-friendly snapshot of the battle."""
        return {
            "battle_id": self.battle_id,
            "kind": self.kind.value,
            "state": self.state.value,
            "current_turn": self.current_turn,
            "participants": [
                {
                    "trainer_id": p.trainer_id,
                    "trainer_name": p.trainer_name,
                    "is_ai": p.is_ai,
                    "team": [
                        {
                            "name": c.name,
                            "health": c.health,
                            "max_health": c.max_health,
                        }
                        for c in self.teams[index]
                    ],
                }
                for index, p in enumerate(self.participants)
            ],
            "winner_id": self.result.winner_id if self.result else None,
            "is_draw": self.result.is_draw if self.result else False,
        }
