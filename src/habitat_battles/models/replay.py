"""Serializable replay projection of a battle.

A replay is the initial teams plus the ordered move log and the result; the
engine only produces it, storing it is up to the caller.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .battle import Battle, MoveRecord

REPLAY_VERSION = "1.0"


class CombatantSnapshot(BaseModel):
    """A combatant as it stood when the battle began."""

    id: str
    name: str
    level: int
    health: int
    max_health: int
    types: list[str] = Field(default_factory=list)
    moves: list[str] = Field(default_factory=list, description="Move names in slot order")


class ParticipantSnapshot(BaseModel):
    """A participant as recorded in the replay."""

    trainer_id: str
    trainer_name: str
    team_index: int
    is_ai: bool
    ai_difficulty: int | None = None


class EffectSnapshot(BaseModel):
    """An effect descriptor attached to a move record."""

    type: str
    target: str = Field(description="team-slot key, e.g. '1-0'")
    value: int
    message: str


class MoveRecordSnapshot(BaseModel):
    """One entry of the move log."""

    turn_number: int
    participant_index: int
    slot_index: int
    move_name: str
    target: str
    damage: int
    effectiveness: float
    critical: bool
    effects: list[EffectSnapshot] = Field(default_factory=list)
    timestamp: datetime


class ResultSnapshot(BaseModel):
    """Battle result as recorded in the replay."""

    is_draw: bool
    winner_id: str | None = None
    loser_id: str | None = None
    experience_gained: dict[str, int] = Field(default_factory=dict)
    currency_won: dict[str, int] = Field(default_factory=dict)
    items_won: dict[str, list[str]] = Field(default_factory=dict)
    achievements: list[str] = Field(default_factory=list)


class ReplayMetadata(BaseModel):
    """Summary numbers for a replay."""

    total_turns: int
    total_moves: int
    duration_seconds: float | None = None
    tags: list[str] = Field(default_factory=list)


class BattleReplay(BaseModel):
    """Complete replay of a battle."""

    version: str = REPLAY_VERSION
    battle_id: str
    kind: str
    participants: list[ParticipantSnapshot]
    initial_teams: list[list[CombatantSnapshot]]
    moves: list[MoveRecordSnapshot]
    result: ResultSnapshot | None = None
    metadata: ReplayMetadata


def _snapshot_move(record: MoveRecord) -> MoveRecordSnapshot:
    return MoveRecordSnapshot(
        turn_number=record.turn_number,
        participant_index=record.participant_index,
        slot_index=record.slot_index,
        move_name=record.move.name,
        target=str(record.target),
        damage=record.damage,
        effectiveness=record.effectiveness,
        critical=record.critical,
        effects=[EffectSnapshot(**effect.to_dict()) for effect in record.effects],
        timestamp=record.timestamp,
    )


def build_replay(battle: Battle, tags: list[str] | None = None) -> BattleReplay:
    """Project a battle into its replay form.

    Args:
        battle: Battle to project (usually an ended one)
        tags: Optional free-form tags for the metadata

    Returns:
        BattleReplay ready for ``model_dump_json()``
    """
    duration = None
    if battle.started_at and battle.ended_at:
        duration = (battle.ended_at - battle.started_at).total_seconds()

    result = None
    if battle.result is not None:
        r = battle.result
        result = ResultSnapshot(
            is_draw=r.is_draw,
            winner_id=r.winner_id,
            loser_id=r.loser_id,
            experience_gained=dict(r.experience_gained),
            currency_won=dict(r.currency_won),
            items_won={k: list(v) for k, v in r.items_won.items()},
            achievements=list(r.achievements),
        )

    return BattleReplay(
        battle_id=battle.battle_id,
        kind=battle.kind.value,
        participants=[
            ParticipantSnapshot(
                trainer_id=p.trainer_id,
                trainer_name=p.trainer_name,
                team_index=p.team_index,
                is_ai=p.is_ai,
                ai_difficulty=p.ai_difficulty,
            )
            for p in battle.participants
        ],
        initial_teams=[
            [
                CombatantSnapshot(
                    id=c.id,
                    name=c.name,
                    level=c.level,
                    health=c.health,
                    max_health=c.max_health,
                    types=[t.value for t in c.types],
                    moves=[m.name for m in c.moves],
                )
                for c in team
            ]
            for team in battle.initial_teams
        ],
        moves=[_snapshot_move(record) for record in battle.move_log],
        result=result,
        metadata=ReplayMetadata(
            # current_turn is one past the last resolved action
            total_turns=battle.current_turn - 1,
            total_moves=len(battle.move_log),
            duration_seconds=duration,
            tags=tags or [],
        ),
    )
