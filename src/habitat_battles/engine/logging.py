"""Combat logging system for tracking and verifying engine output.

Provides structured logging of all battle events including:
- Actions received and resolved
- Damage, healing, stat changes and status effects with before/after state
- Turn advancement and battle end
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..models.battle import BattleResult, CombatantKey
from ..models.creatures import Combatant


class LogEventType(str, Enum):
    """Types of log events."""

    # Battle lifecycle
    BATTLE_START = "battle_start"
    BATTLE_END = "battle_end"
    TURN_ADVANCED = "turn_advanced"

    # Action lifecycle
    ACTION_RECEIVED = "action_received"
    ACTION_RESOLVED = "action_resolved"

    # Attack results
    MOVE_MISSED = "move_missed"
    DAMAGE_DEALT = "damage_dealt"
    HEAL_APPLIED = "heal_applied"
    STAT_CHANGED = "stat_changed"

    # Status ledger
    STATUS_APPLIED = "status_applied"
    STATUS_TICKED = "status_ticked"
    STATUS_EXPIRED = "status_expired"

    # Other actions
    SWITCHED = "switched"
    FORFEITED = "forfeited"


@dataclass
class StateSnapshot:
    """Snapshot of a combatant at a point in time."""

    key: str
    name: str
    health: int
    max_health: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "key": self.key,
            "name": self.name,
            "health": self.health,
            "max_health": self.max_health,
        }


@dataclass
class LogEntry:
    """A single log entry representing a battle event."""

    event_type: LogEventType
    turn_number: int
    timestamp_order: int = 0  # Order within the battle for deterministic sorting

    # Event-specific data
    participant_index: int | None = None
    actor: str | None = None  # team-slot key
    target: str | None = None
    action_type: str | None = None
    action_data: dict[str, Any] | None = None
    move_name: str | None = None
    status_type: str | None = None

    # State before/after for mutating events
    state_before: StateSnapshot | None = None
    state_after: StateSnapshot | None = None

    # Result
    success: bool | None = None
    value: int | None = None
    description: str | None = None

    # For lifecycle snapshots - every combatant
    all_states: list[StateSnapshot] | None = None

    # Battle end info
    winner_id: str | None = None
    is_draw: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {
            "event_type": self.event_type.value,
            "turn_number": self.turn_number,
            "timestamp_order": self.timestamp_order,
        }

        optional = {
            "participant_index": self.participant_index,
            "actor": self.actor,
            "target": self.target,
            "action_type": self.action_type,
            "action_data": self.action_data,
            "move_name": self.move_name,
            "status_type": self.status_type,
            "success": self.success,
            "value": self.value,
            "description": self.description,
            "winner_id": self.winner_id,
            "is_draw": self.is_draw,
        }
        result.update({k: v for k, v in optional.items() if v is not None})

        if self.state_before is not None:
            result["state_before"] = self.state_before.to_dict()
        if self.state_after is not None:
            result["state_after"] = self.state_after.to_dict()
        if self.all_states is not None:
            result["all_states"] = [state.to_dict() for state in self.all_states]

        return result


@dataclass
class CombatLog:
    """Complete log of a battle."""

    battle_id: str
    entries: list[LogEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "battle_id": self.battle_id,
            "entries": [entry.to_dict() for entry in self.entries],
        }

    def get_entries_by_type(self, event_type: LogEventType) -> list[LogEntry]:
        """Get all entries of a specific type."""
        return [e for e in self.entries if e.event_type == event_type]

    def get_entries_for_turn(self, turn_number: int) -> list[LogEntry]:
        """Get all entries for a specific turn."""
        return [e for e in self.entries if e.turn_number == turn_number]

    def format_readable(self) -> str:
        """Format the log in a human-readable format."""
        lines: list[str] = [f"=== Combat Log (Battle {self.battle_id}) ===\n"]

        current_turn = -1
        for entry in self.entries:
            if entry.turn_number != current_turn:
                current_turn = entry.turn_number
                lines.append(f"\n--- Turn {current_turn} ---\n")
            lines.append(self._format_entry(entry))

        return "\n".join(lines)

    def _format_entry(self, entry: LogEntry) -> str:
        """Format a single log entry."""
        match entry.event_type:
            case LogEventType.BATTLE_START:
                return "  Battle begins"

            case LogEventType.ACTION_RECEIVED:
                return f"  P{entry.participant_index} submits {entry.action_type}"

            case LogEventType.ACTION_RESOLVED:
                status = "✓" if entry.success else "✗"
                return f"    {status} {entry.description}"

            case LogEventType.MOVE_MISSED:
                return f"    → {entry.actor} {entry.move_name} missed"

            case LogEventType.DAMAGE_DEALT | LogEventType.HEAL_APPLIED:
                hp_change = ""
                if entry.state_before and entry.state_after:
                    hp_change = f" [HP: {entry.state_before.health} → {entry.state_after.health}]"
                return f"    → {entry.event_type.value} on {entry.target} = {entry.value}{hp_change}"

            case LogEventType.STAT_CHANGED:
                return f"    → {entry.target} {entry.description} ({entry.value:+d})"

            case LogEventType.STATUS_APPLIED:
                return f"    → {entry.target} gains {entry.status_type} ({entry.value}/tick)"

            case LogEventType.STATUS_TICKED:
                return f"    ~ {entry.status_type} deals {entry.value} to {entry.target}"

            case LogEventType.STATUS_EXPIRED:
                return f"    ~ {entry.status_type} wears off {entry.target}"

            case LogEventType.SWITCHED:
                return f"    ⇄ {entry.actor} ↔ {entry.target}"

            case LogEventType.FORFEITED:
                return f"  P{entry.participant_index} forfeits"

            case LogEventType.TURN_ADVANCED:
                if entry.all_states:
                    states = ", ".join(f"{s.key}:{s.health}/{s.max_health}" for s in entry.all_states)
                    return f"  Turn {entry.turn_number} ends [{states}]"
                return f"  Turn {entry.turn_number} ends"

            case LogEventType.BATTLE_END:
                if entry.is_draw:
                    return "  *** DRAW ***"
                return f"  *** WINNER: {entry.winner_id} ***"

            case _:
                return f"    {entry.event_type.value}: {entry.description or ''}"


class CombatLogger:
    """Logger for tracking battle events.

    Usage:
        logger = CombatLogger(battle_id="battle_1")
        resolver = ActionResolver(battle, logger=logger)
        resolver.resolve(Action.attack(0, move_index=0))

        # Get the complete log
        log = logger.get_log()
        print(log.format_readable())
    """

    def __init__(self, battle_id: str) -> None:
        """Initialize the logger for a battle."""
        self.battle_id = battle_id
        self._log = CombatLog(battle_id=battle_id)
        self._order_counter = 0

    def _next_order(self) -> int:
        """Get the next timestamp order value."""
        self._order_counter += 1
        return self._order_counter

    def _append(self, entry: LogEntry) -> None:
        entry.timestamp_order = self._next_order()
        self._log.entries.append(entry)

    def get_log(self) -> CombatLog:
        """Get the complete combat log."""
        return self._log

    def clear(self) -> None:
        """Clear all log entries."""
        self._log.entries.clear()
        self._order_counter = 0

    @staticmethod
    def snapshot_state(key: CombatantKey, combatant: Combatant) -> StateSnapshot:
        """Create a snapshot of a combatant."""
        return StateSnapshot(
            key=str(key),
            name=combatant.name,
            health=combatant.health,
            max_health=combatant.max_health,
        )

    @classmethod
    def snapshot_teams(cls, teams: list[list[Combatant]]) -> list[StateSnapshot]:
        """Snapshot every combatant in slot order."""
        return [
            cls.snapshot_state(CombatantKey(team_index, slot_index), combatant)
            for team_index, team in enumerate(teams)
            for slot_index, combatant in enumerate(team)
        ]

    def log_battle_start(self, turn_number: int, teams: list[list[Combatant]]) -> None:
        """Log the start of the battle with an initial snapshot."""
        self._append(
            LogEntry(
                event_type=LogEventType.BATTLE_START,
                turn_number=turn_number,
                all_states=self.snapshot_teams(teams),
            )
        )

    def log_action_received(self, turn_number: int, action_type: str, action_data: dict[str, Any]) -> None:
        """Log an action entering the resolver."""
        self._append(
            LogEntry(
                event_type=LogEventType.ACTION_RECEIVED,
                turn_number=turn_number,
                participant_index=action_data.get("participant_index"),
                action_type=action_type,
                action_data=action_data,
            )
        )

    def log_action_resolved(self, turn_number: int, action_type: str, success: bool, message: str) -> None:
        """Log the outcome of an action."""
        self._append(
            LogEntry(
                event_type=LogEventType.ACTION_RESOLVED,
                turn_number=turn_number,
                action_type=action_type,
                success=success,
                description=message,
            )
        )

    def log_move_missed(self, turn_number: int, actor: CombatantKey, move_name: str) -> None:
        """Log a move that failed its accuracy roll."""
        self._append(
            LogEntry(
                event_type=LogEventType.MOVE_MISSED,
                turn_number=turn_number,
                participant_index=actor.team,
                actor=str(actor),
                move_name=move_name,
            )
        )

    def log_health_change(
        self,
        event_type: LogEventType,
        turn_number: int,
        actor: CombatantKey,
        target: CombatantKey,
        value: int,
        description: str,
        state_before: StateSnapshot,
        state_after: StateSnapshot,
        move_name: str | None = None,
    ) -> None:
        """Log damage or healing with before/after state."""
        self._append(
            LogEntry(
                event_type=event_type,
                turn_number=turn_number,
                participant_index=actor.team,
                actor=str(actor),
                target=str(target),
                move_name=move_name,
                value=value,
                description=description,
                state_before=state_before,
                state_after=state_after,
            )
        )

    def log_stat_change(self, turn_number: int, target: CombatantKey, stat: str, delta: int) -> None:
        """Log a stat modification."""
        self._append(
            LogEntry(
                event_type=LogEventType.STAT_CHANGED,
                turn_number=turn_number,
                target=str(target),
                value=delta,
                description=stat,
            )
        )

    def log_status_applied(
        self, turn_number: int, target: CombatantKey, status_type: str, magnitude: int, duration: int
    ) -> None:
        """Log a status effect entering the ledger."""
        self._append(
            LogEntry(
                event_type=LogEventType.STATUS_APPLIED,
                turn_number=turn_number,
                target=str(target),
                status_type=status_type,
                value=magnitude,
                description=f"{duration} turns",
            )
        )

    def log_status_tick(self, turn_number: int, target: CombatantKey, status_type: str, damage: int) -> None:
        """Log periodic status damage."""
        self._append(
            LogEntry(
                event_type=LogEventType.STATUS_TICKED,
                turn_number=turn_number,
                target=str(target),
                status_type=status_type,
                value=damage,
            )
        )

    def log_status_expired(self, turn_number: int, target: CombatantKey, status_type: str) -> None:
        """Log a status effect leaving the ledger."""
        self._append(
            LogEntry(
                event_type=LogEventType.STATUS_EXPIRED,
                turn_number=turn_number,
                target=str(target),
                status_type=status_type,
            )
        )

    def log_switch(self, turn_number: int, actor: CombatantKey, target: CombatantKey) -> None:
        """Log a positional switch."""
        self._append(
            LogEntry(
                event_type=LogEventType.SWITCHED,
                turn_number=turn_number,
                participant_index=actor.team,
                actor=str(actor),
                target=str(target),
            )
        )

    def log_forfeit(self, turn_number: int, participant_index: int) -> None:
        """Log a forfeit."""
        self._append(
            LogEntry(
                event_type=LogEventType.FORFEITED,
                turn_number=turn_number,
                participant_index=participant_index,
            )
        )

    def log_turn_advanced(self, turn_number: int, teams: list[list[Combatant]]) -> None:
        """Log the end of a turn with a snapshot of every combatant."""
        self._append(
            LogEntry(
                event_type=LogEventType.TURN_ADVANCED,
                turn_number=turn_number,
                all_states=self.snapshot_teams(teams),
            )
        )

    def log_battle_end(self, turn_number: int, result: BattleResult) -> None:
        """Log the battle result."""
        self._append(
            LogEntry(
                event_type=LogEventType.BATTLE_END,
                turn_number=turn_number,
                winner_id=result.winner_id,
                is_draw=result.is_draw,
            )
        )
