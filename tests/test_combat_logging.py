"""Tests for the combat logging system."""

from habitat_battles.engine.logging import (
    CombatLog,
    CombatLogger,
    LogEntry,
    LogEventType,
    StateSnapshot,
)
from habitat_battles.engine.resolver import ActionResolver
from habitat_battles.engine.status import StatusEffect
from habitat_battles.engine.types import Action
from habitat_battles.models.battle import BattleResult, CombatantKey
from habitat_battles.models.creatures import PoisonEffect, StatChangeEffect
from habitat_battles.models.enums import StatName, StatusType


class TestStateSnapshot:
    """Tests for StateSnapshot data class."""

    def test_snapshot_from_combatant(self, make_combatant):
        """Test snapshotting a combatant by key."""
        combatant = make_combatant(name="Heron", health=40, max_health=90)

        snapshot = CombatLogger.snapshot_state(CombatantKey(1, 0), combatant)

        assert snapshot.key == "1-0"
        assert snapshot.name == "Heron"
        assert snapshot.health == 40
        assert snapshot.max_health == 90

    def test_snapshot_to_dict(self):
        """Test converting snapshot to dictionary."""
        snapshot = StateSnapshot(key="0-1", name="Stoat", health=12, max_health=60)

        assert snapshot.to_dict() == {"key": "0-1", "name": "Stoat", "health": 12, "max_health": 60}


class TestLogEntry:
    """Tests for LogEntry data class."""

    def test_to_dict_omits_empty_fields(self):
        """Test only populated fields are serialised."""
        entry = LogEntry(event_type=LogEventType.BATTLE_START, turn_number=1, timestamp_order=1)

        assert entry.to_dict() == {"event_type": "battle_start", "turn_number": 1, "timestamp_order": 1}

    def test_to_dict_with_states(self):
        """Test before/after snapshots are nested."""
        before = StateSnapshot(key="1-0", name="Heron", health=100, max_health=100)
        after = StateSnapshot(key="1-0", name="Heron", health=79, max_health=100)
        entry = LogEntry(
            event_type=LogEventType.DAMAGE_DEALT,
            turn_number=2,
            actor="0-0",
            target="1-0",
            value=21,
            state_before=before,
            state_after=after,
        )

        result = entry.to_dict()

        assert result["value"] == 21
        assert result["state_before"]["health"] == 100
        assert result["state_after"]["health"] == 79


class TestCombatLogger:
    """Tests for CombatLogger."""

    def test_timestamp_order_is_monotonic(self, make_battle):
        """Test each entry gets the next order number."""
        battle = make_battle()
        logger = CombatLogger(battle.battle_id)

        logger.log_battle_start(1, battle.teams)
        logger.log_action_received(1, "attack", {"move_index": 0})
        logger.log_turn_advanced(1, battle.teams)

        orders = [entry.timestamp_order for entry in logger.get_log().entries]
        assert orders == [1, 2, 3]

    def test_clear_resets_order(self, make_battle):
        """Test clearing the logger starts numbering again."""
        battle = make_battle()
        logger = CombatLogger(battle.battle_id)
        logger.log_battle_start(1, battle.teams)

        logger.clear()
        logger.log_forfeit(1, 0)

        entries = logger.get_log().entries
        assert len(entries) == 1
        assert entries[0].timestamp_order == 1

    def test_battle_start_snapshots_everyone(self, make_battle):
        """Test the start entry carries every combatant."""
        battle = make_battle()
        logger = CombatLogger(battle.battle_id)

        logger.log_battle_start(1, battle.teams)

        entry = logger.get_log().entries[0]
        assert [s.key for s in entry.all_states] == ["0-0", "1-0"]

    def test_battle_end(self):
        """Test the end entry records winner and draw flag."""
        logger = CombatLogger("b")

        logger.log_battle_end(4, BattleResult(is_draw=False, winner_id="trainer-0"))

        entry = logger.get_log().entries[0]
        assert entry.event_type == LogEventType.BATTLE_END
        assert entry.winner_id == "trainer-0"
        assert entry.is_draw is False


class TestCombatLog:
    """Tests for CombatLog queries and formatting."""

    def _create_log(self) -> CombatLog:
        log = CombatLog(battle_id="b-1")
        log.entries = [
            LogEntry(event_type=LogEventType.BATTLE_START, turn_number=1, timestamp_order=1),
            LogEntry(
                event_type=LogEventType.ACTION_RECEIVED,
                turn_number=1,
                timestamp_order=2,
                participant_index=0,
                action_type="attack",
            ),
            LogEntry(event_type=LogEventType.MOVE_MISSED, turn_number=1, timestamp_order=3, actor="0-0"),
            LogEntry(
                event_type=LogEventType.ACTION_RECEIVED,
                turn_number=2,
                timestamp_order=4,
                participant_index=1,
                action_type="forfeit",
            ),
        ]
        return log

    def test_entries_by_type(self):
        """Test filtering entries by event type."""
        log = self._create_log()

        received = log.get_entries_by_type(LogEventType.ACTION_RECEIVED)

        assert [e.participant_index for e in received] == [0, 1]

    def test_entries_for_turn(self):
        """Test filtering entries by turn."""
        log = self._create_log()

        assert len(log.get_entries_for_turn(1)) == 3
        assert len(log.get_entries_for_turn(2)) == 1

    def test_to_dict(self):
        """Test log serialisation."""
        result = self._create_log().to_dict()

        assert result["battle_id"] == "b-1"
        assert len(result["entries"]) == 4

    def test_format_readable(self):
        """Test the readable rendering groups entries by turn."""
        text = self._create_log().format_readable()

        assert "=== Combat Log (Battle b-1) ===" in text
        assert "--- Turn 1 ---" in text
        assert "--- Turn 2 ---" in text
        assert "P0 submits attack" in text
        assert "P1 submits forfeit" in text


class TestResolverLogging:
    """Tests for structured logging driven by the resolver."""

    def test_status_lifecycle_logged(self, make_battle, make_combatant, make_move, scripted_rng):
        """Test applying, ticking and expiring poison are all logged."""
        move = make_move(effects=[PoisonEffect(chance=1.0)])
        battle = make_battle(teams=[[make_combatant(id="a-0", moves=[move])], [make_combatant(id="b-0")]])
        logger = CombatLogger(battle.battle_id)
        resolver = ActionResolver(battle, rng=scripted_rng(), logger=logger, status_duration=1)

        resolver.resolve(Action.attack(0, 0))

        log = logger.get_log()
        applied = log.get_entries_by_type(LogEventType.STATUS_APPLIED)
        ticked = log.get_entries_by_type(LogEventType.STATUS_TICKED)
        expired = log.get_entries_by_type(LogEventType.STATUS_EXPIRED)
        assert applied[0].target == "1-0"
        assert applied[0].value == 12
        assert ticked[0].value == 12
        assert expired[0].status_type == StatusType.POISON.value

    def test_stat_change_logged(self, make_battle, make_combatant, make_move, scripted_rng):
        """Test stat changes record the applied delta."""
        move = make_move(effects=[StatChangeEffect(chance=1.0, magnitude=-5, stat=StatName.ATTACK)])
        battle = make_battle(teams=[[make_combatant(id="a-0", moves=[move])], [make_combatant(id="b-0")]])
        logger = CombatLogger(battle.battle_id)
        resolver = ActionResolver(battle, rng=scripted_rng(), logger=logger)

        resolver.resolve(Action.attack(0, 0))

        change = logger.get_log().get_entries_by_type(LogEventType.STAT_CHANGED)[0]
        assert change.value == -5
        assert "(-5)" in logger.get_log().format_readable()

    def test_switch_and_miss_logged(self, make_battle, make_combatant, make_move, scripted_rng):
        """Test misses and switches produce their own entries."""
        team = [make_combatant(id="a-0", moves=[make_move(accuracy=50)]), make_combatant(id="a-1")]
        battle = make_battle(teams=[team, [make_combatant(id="b-0")]])
        logger = CombatLogger(battle.battle_id)
        resolver = ActionResolver(battle, rng=scripted_rng([0.9]), logger=logger)

        resolver.resolve(Action.attack(0, 0))
        resolver.resolve(Action.switch(0, 1))

        log = logger.get_log()
        assert len(log.get_entries_by_type(LogEventType.MOVE_MISSED)) == 1
        switched = log.get_entries_by_type(LogEventType.SWITCHED)[0]
        assert switched.actor == "0-0"
        assert switched.target == "0-1"

    def test_tick_damage_logged_for_existing_status(self, make_battle):
        """Test ticks of effects added directly to the ledger are logged."""
        battle = make_battle()
        logger = CombatLogger(battle.battle_id)
        resolver = ActionResolver(battle, logger=logger)
        resolver.ledger.add(
            CombatantKey(0, 0),
            StatusEffect(type=StatusType.BURN, duration=3, magnitude=6, source="b-0"),
        )

        resolver.resolve(Action.use_item(0, "berry"))

        ticked = logger.get_log().get_entries_by_type(LogEventType.STATUS_TICKED)
        assert ticked[0].status_type == "burn"
        assert ticked[0].value == 6
