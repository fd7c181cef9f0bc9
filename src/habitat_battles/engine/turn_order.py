"""Turn order scheduler - advisory strike order by speed."""

from ..models.battle import CombatantKey
from ..models.creatures import Combatant


class TurnOrderScheduler:
    """Computes a descending-speed ordering of all living combatants.

    The order is metadata for display and AI strategy. The resolver does not
    consult it: whoever submits an action acts.
    """

    def compute(self, teams: list[list[Combatant]]) -> list[CombatantKey]:
        """Order living combatants fastest first.

        Ties keep (team, slot) order so the result is deterministic.

        Args:
            teams: Teams of the battle

        Returns:
            Keys of combatants with positive health, fastest first
        """
        entries: list[tuple[int, CombatantKey]] = []
        for team_index, team in enumerate(teams):
            for slot_index, combatant in enumerate(team):
                if combatant.is_alive():
                    entries.append((combatant.speed, CombatantKey(team_index, slot_index)))

        entries.sort(key=lambda entry: (-entry[0], entry[1]))
        return [key for _, key in entries]
