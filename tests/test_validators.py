"""Tests for battle construction validators."""

from habitat_battles.models.battle import BattleSettings, Participant
from habitat_battles.models.validators import BattleValidator, validate_battle


class TestBattleValidator:
    """Tests for BattleValidator."""

    def test_valid_battle(self, make_battle):
        """Test a well-formed battle has no problems."""
        result = BattleValidator().validate(make_battle())

        assert result.valid
        assert result.errors == []
        assert validate_battle(make_battle()) == []

    def test_missing_id(self, make_battle):
        """Test an empty battle id is rejected."""
        battle = make_battle()
        battle.battle_id = "  "

        assert "Battle ID is required" in validate_battle(battle)

    def test_single_participant(self, make_battle, make_combatant):
        """Test a battle needs at least two sides."""
        battle = make_battle(teams=[[make_combatant()]], ai=(False,))

        assert "Battle must have at least 2 participants" in validate_battle(battle)

    def test_team_count_mismatch(self, make_battle, make_combatant):
        """Test teams must line up with participants."""
        battle = make_battle()
        battle.teams.append([make_combatant(id="c-0")])

        problems = validate_battle(battle)

        assert "Number of teams must match number of participants" in problems

    def test_empty_team(self, make_battle, make_combatant):
        """Test empty teams are rejected."""
        battle = make_battle(teams=[[make_combatant()], []])

        result = BattleValidator().validate(battle)

        assert not result.valid
        assert result.errors[0].field == "teams[1]"

    def test_team_size_cap(self, make_battle, make_combatant):
        """Test teams larger than the settings cap are rejected."""
        team = [make_combatant(id=f"a-{i}") for i in range(3)]
        battle = make_battle(teams=[team, [make_combatant(id="b-0")]], settings=BattleSettings(max_team_size=2))

        problems = validate_battle(battle)

        assert "Team exceeds the size cap of 2" in problems

    def test_too_many_moves(self, make_battle, make_combatant, make_move):
        """Test combatants that bypassed the move cap are caught."""
        battle = make_battle()
        battle.teams[0][0].moves.extend(make_move(name=f"Move {i}") for i in range(4))

        problems = validate_battle(battle)

        assert "Badger knows more than 4 moves" in problems

    def test_team_index_mismatch(self, make_battle):
        """Test participants must point at their own team."""
        battle = make_battle()
        battle.participants[1] = Participant(trainer_id="trainer-1", trainer_name="Trainer 1", team_index=0)

        result = BattleValidator().validate(battle)

        assert result.errors[-1].field == "participants[1].team_index"
        assert result.errors[-1].value == "0"
