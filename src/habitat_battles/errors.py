"""Battle exceptions.

Only protocol errors (caller misuse) are raised. Gameplay-legal failures such
as a missed move or an invalid switch target are reported through
``ActionOutcome(success=False)`` instead.
"""


class BattleError(Exception):
    """Base for all battle engine errors."""


class InvalidStateError(BattleError):
    """Raised when an operation does not fit the battle's lifecycle state."""


class InvalidParticipantError(BattleError):
    """Raised when an action names a participant that does not exist or may not act."""


class InvalidSlotError(BattleError):
    """Raised when an action names a team slot that does not exist."""


class UnknownActionError(BattleError):
    """Raised when an action type is not one the resolver understands."""


class BattleValidationError(BattleError):
    """Raised when a battle cannot be constructed from the given parts."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__("Invalid battle: " + "; ".join(problems))
        self.problems = problems
