"""Tests for the replay projection."""

import json

from habitat_battles.engine.resolver import ActionResolver
from habitat_battles.engine.types import Action
from habitat_battles.models.creatures import PoisonEffect
from habitat_battles.models.replay import REPLAY_VERSION, BattleReplay, build_replay


class TestBuildReplay:
    """Tests for build_replay."""

    def _play(self, make_battle, make_combatant, make_move, scripted_rng):
        move = make_move(name="Sting", effects=[PoisonEffect(chance=1.0)])
        battle = make_battle(
            teams=[[make_combatant(id="a-0", name="Wasp", moves=[move])], [make_combatant(id="b-0", health=40)]],
        )
        resolver = ActionResolver(battle, rng=scripted_rng())
        resolver.resolve(Action.attack(0, 0))
        resolver.resolve(Action.use_item(1, "berry"))
        return battle

    def test_replay_of_finished_battle(self, make_battle, make_combatant, make_move, scripted_rng):
        """Test the replay captures teams, moves and result."""
        battle = self._play(make_battle, make_combatant, make_move, scripted_rng)

        replay = build_replay(battle, tags=["test"])

        assert replay.version == REPLAY_VERSION
        assert replay.battle_id == battle.battle_id
        assert replay.kind == "trainer"
        assert [p.trainer_id for p in replay.participants] == ["trainer-0", "trainer-1"]
        assert replay.initial_teams[1][0].health == 40
        assert replay.initial_teams[0][0].moves == ["Sting"]
        assert len(replay.moves) == 1
        assert replay.moves[0].move_name == "Sting"
        assert replay.moves[0].target == "1-0"
        assert [e.type for e in replay.moves[0].effects] == ["damage", "status"]
        assert replay.result.winner_id == "trainer-0"
        assert replay.metadata.total_turns == 2
        assert replay.metadata.total_moves == 1
        assert replay.metadata.duration_seconds is not None
        assert replay.metadata.tags == ["test"]

    def test_initial_teams_unaffected_by_battle(self, make_battle, make_combatant, make_move, scripted_rng):
        """Test the replay starts from the pre-battle snapshot."""
        battle = self._play(make_battle, make_combatant, make_move, scripted_rng)

        replay = build_replay(battle)

        assert battle.teams[1][0].health == 0
        assert replay.initial_teams[1][0].health == 40

    def test_json_round_trip(self, make_battle, make_combatant, make_move, scripted_rng):
        """Test the replay serialises to JSON and loads back."""
        battle = self._play(make_battle, make_combatant, make_move, scripted_rng)

        payload = build_replay(battle).model_dump_json()
        restored = BattleReplay.model_validate_json(payload)

        assert json.loads(payload)["battle_id"] == battle.battle_id
        assert restored.result.winner_id == "trainer-0"

    def test_replay_of_unfinished_battle(self, make_battle):
        """Test an in-progress battle has no result or duration."""
        replay = build_replay(make_battle())

        assert replay.result is None
        assert replay.metadata.total_turns == 0
        assert replay.metadata.duration_seconds is None
