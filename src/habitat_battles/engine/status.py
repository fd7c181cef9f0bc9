"""Status effect ledger - timed periodic conditions per combatant."""

from dataclasses import dataclass

from ..models.battle import CombatantKey
from ..models.creatures import Combatant
from ..models.enums import StatusType


@dataclass
class StatusEffect:
    """A timed condition attached to one combatant."""

    type: StatusType
    duration: int  # Remaining ticks
    magnitude: int  # Damage per tick
    source: str  # Id of the combatant that inflicted it


@dataclass
class StatusTick:
    """What happened to one effect during a tick."""

    key: CombatantKey
    type: StatusType
    damage: int
    expired: bool


class StatusLedger:
    """Owns every active status effect, keyed by (team, slot).

    At most one effect of a given type is active per combatant; adding a
    duplicate replaces the older instance.
    """

    def __init__(self, teams: list[list[Combatant]] | None = None) -> None:
        self._effects: dict[CombatantKey, list[StatusEffect]] = {}
        for team_index, team in enumerate(teams or []):
            for slot_index in range(len(team)):
                self._effects[CombatantKey(team_index, slot_index)] = []

    def add(self, key: CombatantKey, effect: StatusEffect) -> StatusEffect | None:
        """Attach an effect, replacing any existing effect of the same type.

        Returns:
            The replaced effect, if there was one
        """
        effects = self._effects.setdefault(key, [])
        replaced = None
        for index, existing in enumerate(effects):
            if existing.type == effect.type:
                replaced = effects.pop(index)
                break
        effects.append(effect)
        return replaced

    def effects_for(self, key: CombatantKey) -> list[StatusEffect]:
        """Active effects on a combatant (a copy)."""
        return list(self._effects.get(key, []))

    def has(self, key: CombatantKey, status_type: StatusType) -> bool:
        """Check if a combatant has an active effect of the given type."""
        return any(e.type == status_type for e in self._effects.get(key, []))

    def clear(self, key: CombatantKey) -> None:
        """Drop every effect on a combatant."""
        self._effects[key] = []

    def swap(self, first: CombatantKey, second: CombatantKey) -> None:
        """Exchange the effects of two slots so they follow their combatants."""
        a = self._effects.get(first, [])
        b = self._effects.get(second, [])
        self._effects[first], self._effects[second] = b, a

    def tick(self, teams: list[list[Combatant]]) -> list[StatusTick]:
        """Apply one end-of-action tick to every tracked effect.

        Poison and burn subtract their magnitude from health (clamped at 0),
        then every effect loses one turn of duration and is removed at 0.
        Fainted combatants are skipped and their effects stay frozen.

        Args:
            teams: The battle's teams, used to resolve keys to combatants

        Returns:
            One StatusTick per effect processed, in key order
        """
        ticks: list[StatusTick] = []
        for key in sorted(self._effects):
            effects = self._effects[key]
            if not effects:
                continue
            if key.team >= len(teams) or key.slot >= len(teams[key.team]):
                continue
            combatant = teams[key.team][key.slot]
            if combatant.is_fainted():
                continue

            remaining: list[StatusEffect] = []
            for effect in effects:
                damage = 0
                match effect.type:
                    case StatusType.POISON | StatusType.BURN:
                        damage = combatant.apply_damage(effect.magnitude)
                effect.duration -= 1
                expired = effect.duration <= 0
                if not expired:
                    remaining.append(effect)
                ticks.append(StatusTick(key=key, type=effect.type, damage=damage, expired=expired))
            self._effects[key] = remaining
        return ticks

    def __len__(self) -> int:
        return sum(len(effects) for effects in self._effects.values())
