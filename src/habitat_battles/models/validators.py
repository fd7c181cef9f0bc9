"""Validators for battles assembled by callers."""

from dataclasses import dataclass, field

from .battle import Battle
from .creatures import MAX_MOVES


@dataclass
class ValidationError:
    """A single validation error."""

    field: str
    message: str
    value: str | None = None


@dataclass
class ValidationResult:
    """Result of validation."""

    valid: bool = True
    errors: list[ValidationError] = field(default_factory=list)

    def add_error(self, field: str, message: str, value: str | None = None) -> None:
        """Add a validation error."""
        self.errors.append(ValidationError(field=field, message=message, value=value))
        self.valid = False

    @property
    def messages(self) -> list[str]:
        """Flat list of error messages."""
        return [e.message for e in self.errors]


class BattleValidator:
    """Validate a battle before the engine takes ownership of it."""

    def validate(self, battle: Battle) -> ValidationResult:
        """Validate a battle aggregate.

        Args:
            battle: Battle to validate

        Returns:
            ValidationResult with all problems found
        """
        result = ValidationResult()

        if not battle.battle_id or not battle.battle_id.strip():
            result.add_error("battle_id", "Battle ID is required")

        if len(battle.participants) < 2:
            result.add_error(
                "participants",
                "Battle must have at least 2 participants",
                str(len(battle.participants)),
            )

        if len(battle.teams) != len(battle.participants):
            result.add_error(
                "teams",
                "Number of teams must match number of participants",
                f"{len(battle.teams)} teams / {len(battle.participants)} participants",
            )

        cap = battle.settings.max_team_size
        for team_index, team in enumerate(battle.teams):
            if not team:
                result.add_error(f"teams[{team_index}]", "Team must not be empty")
            if len(team) > cap:
                result.add_error(
                    f"teams[{team_index}]",
                    f"Team exceeds the size cap of {cap}",
                    str(len(team)),
                )
            for slot, combatant in enumerate(team):
                if len(combatant.moves) > MAX_MOVES:
                    result.add_error(
                        f"teams[{team_index}][{slot}].moves",
                        f"{combatant.name} knows more than {MAX_MOVES} moves",
                        str(len(combatant.moves)),
                    )

        for index, participant in enumerate(battle.participants):
            if participant.team_index != index:
                result.add_error(
                    f"participants[{index}].team_index",
                    "Participant team index must match its position",
                    str(participant.team_index),
                )

        return result


def validate_battle(battle: Battle) -> list[str]:
    """Return the list of problems with a battle (empty when valid)."""
    return BattleValidator().validate(battle).messages
