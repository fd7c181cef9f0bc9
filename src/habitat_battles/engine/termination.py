"""Battle termination detection."""

from dataclasses import dataclass

from ..models.battle import Battle, BattleResult

DEFAULT_WINNER_EXPERIENCE = 100
DEFAULT_WINNER_CURRENCY = 50


@dataclass
class TerminationCheck:
    """Outcome of a termination check."""

    ended: bool
    result: BattleResult | None = None


class TerminationDetector:
    """Decides whether a battle is over after an action resolves."""

    def __init__(
        self,
        winner_experience: int = DEFAULT_WINNER_EXPERIENCE,
        winner_currency: int = DEFAULT_WINNER_CURRENCY,
    ) -> None:
        self.winner_experience = winner_experience
        self.winner_currency = winner_currency

    def check(self, battle: Battle) -> TerminationCheck:
        """Evaluate team wipe-outs.

        Every team wiped is a draw. Exactly one surviving team wins and
        collects the flat rewards; the losers get nothing.

        Args:
            battle: Battle to evaluate

        Returns:
            TerminationCheck with the result when the battle is decided
        """
        alive = [battle.team_alive(index) for index in range(len(battle.teams))]

        if all(alive):
            return TerminationCheck(ended=False)

        surviving = [index for index, is_alive in enumerate(alive) if is_alive]

        if not surviving:
            return TerminationCheck(ended=True, result=BattleResult(is_draw=True))

        if len(surviving) > 1:
            # Free-for-all with more than one side still standing
            return TerminationCheck(ended=False)

        winner = battle.participants[surviving[0]]
        loser_index = alive.index(False)
        loser = battle.participants[loser_index]
        return TerminationCheck(
            ended=True,
            result=BattleResult(
                is_draw=False,
                winner_id=winner.trainer_id,
                loser_id=loser.trainer_id,
                experience_gained={winner.trainer_id: self.winner_experience},
                currency_won={winner.trainer_id: self.winner_currency},
            ),
        )
