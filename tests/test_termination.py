"""Tests for battle termination detection."""

from habitat_battles.engine.termination import TerminationDetector


class TestTerminationDetector:
    """Tests for TerminationDetector."""

    def test_not_over_while_both_sides_stand(self, make_battle):
        """Test a battle with two living teams continues."""
        check = TerminationDetector().check(make_battle())

        assert not check.ended
        assert check.result is None

    def test_winner_gets_flat_rewards(self, make_battle):
        """Test the surviving side wins with experience and currency."""
        battle = make_battle()
        battle.teams[1][0].health = 0

        check = TerminationDetector().check(battle)

        assert check.ended
        assert not check.result.is_draw
        assert check.result.winner_id == "trainer-0"
        assert check.result.loser_id == "trainer-1"
        assert check.result.experience_gained == {"trainer-0": 100}
        assert check.result.currency_won == {"trainer-0": 50}

    def test_both_wiped_is_draw(self, make_battle):
        """Test simultaneous wipe-out is a draw with no winner."""
        battle = make_battle()
        battle.teams[0][0].health = 0
        battle.teams[1][0].health = 0

        check = TerminationDetector().check(battle)

        assert check.ended
        assert check.result.is_draw
        assert check.result.winner_id is None
        assert check.result.experience_gained == {}

    def test_custom_rewards(self, make_battle):
        """Test reward amounts are configurable."""
        battle = make_battle()
        battle.teams[0][0].health = 0

        check = TerminationDetector(winner_experience=10, winner_currency=3).check(battle)

        assert check.result.winner_id == "trainer-1"
        assert check.result.experience_gained == {"trainer-1": 10}
        assert check.result.currency_won == {"trainer-1": 3}

    def test_three_sides_continue_until_one_remains(self, make_battle, make_combatant):
        """Test free-for-all battles end only when one team is left."""
        battle = make_battle(
            teams=[
                [make_combatant(id="a-0")],
                [make_combatant(id="b-0")],
                [make_combatant(id="c-0")],
            ],
            ai=(False, False, False),
        )
        battle.teams[0][0].health = 0

        assert not TerminationDetector().check(battle).ended

        battle.teams[2][0].health = 0
        check = TerminationDetector().check(battle)

        assert check.ended
        assert check.result.winner_id == "trainer-1"
