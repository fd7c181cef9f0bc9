"""Action resolver - turns one submitted action into a battle state change."""

import logging
import math
import random

from ..errors import BattleValidationError, InvalidStateError, UnknownActionError
from ..models.battle import Battle, BattleResult, CombatantKey, EffectDescriptor, MoveRecord
from ..models.creatures import BurnEffect, Combatant, HealEffect, Move, MoveEffect, PoisonEffect, StatChangeEffect
from ..models.enums import ActionType, BattleState, EffectDescriptorType, EffectTarget, StatusType
from ..models.validators import validate_battle
from . import combat_math
from .logging import CombatLogger, LogEventType
from .status import StatusEffect, StatusLedger
from .termination import TerminationDetector
from .turn_order import TurnOrderScheduler
from .types import Action, ActionOutcome

log = logging.getLogger("habitat_battles.engine")

DEFAULT_POISON_FRACTION = 0.125
DEFAULT_BURN_FRACTION = 0.0625
DEFAULT_STATUS_DURATION = 3


class ActionResolver:
    """Owns the battle state machine and resolves actions one at a time.

    Callers must guarantee one action in flight at a time; the resolver does no
    locking. It does not enforce whose turn it is: the acting participant is
    whoever the action names.
    """

    def __init__(
        self,
        battle: Battle,
        rng: random.Random | None = None,
        logger: CombatLogger | None = None,
        termination: TerminationDetector | None = None,
        poison_fraction: float = DEFAULT_POISON_FRACTION,
        burn_fraction: float = DEFAULT_BURN_FRACTION,
        status_duration: int = DEFAULT_STATUS_DURATION,
    ) -> None:
        """Initialize the resolver.

        Args:
            battle: Fully populated battle to take ownership of
            rng: Random source for every roll (seed it for reproducible battles)
            logger: Optional structured combat logger
            termination: Termination detector (default flat rewards if omitted)
            poison_fraction: Poison tick damage as a fraction of target max health
            burn_fraction: Burn tick damage as a fraction of target max health
            status_duration: Ticks a newly inflicted status lasts

        Raises:
            BattleValidationError: If the battle is malformed
        """
        problems = validate_battle(battle)
        if problems:
            raise BattleValidationError(problems)

        self.battle = battle
        self.rng = rng or random.Random()
        self.logger = logger
        self.termination = termination or TerminationDetector()
        self.poison_fraction = poison_fraction
        self.burn_fraction = burn_fraction
        self.status_duration = status_duration

        self.ledger = StatusLedger(battle.teams)
        self.turn_order = TurnOrderScheduler().compute(battle.teams)

        if self.logger:
            self.logger.log_battle_start(battle.current_turn, battle.teams)

    def get_battle(self) -> Battle:
        """Get the battle being resolved."""
        return self.battle

    def effects_for(self, key: CombatantKey) -> list[StatusEffect]:
        """Active status effects on a combatant."""
        return self.ledger.effects_for(key)

    def resolve(self, action: Action) -> ActionOutcome:
        """Resolve one action against the battle.

        Flow:
        1. Validate battle state, participant and acting slot
        2. Apply the action (attack / switch / item / forfeit)
        3. Tick the status ledger
        4. Detect termination
        5. Advance the turn counter

        Status damage in step 3 can end a battle the action itself did not.

        Args:
            action: Action to resolve

        Returns:
            ActionOutcome describing what happened

        Raises:
            InvalidStateError: If the battle is not in progress
            InvalidParticipantError: If the participant index is out of range
            InvalidSlotError: If the acting slot is out of range
            UnknownActionError: If the action type is not handled
        """
        battle = self.battle
        if battle.state != BattleState.IN_PROGRESS:
            raise InvalidStateError(f"Battle is {battle.state.value}, not in progress")
        if not isinstance(action.type, ActionType):
            raise UnknownActionError(f"Unknown action type: {action.type!r}")

        battle.get_participant(action.participant_index)
        if action.type != ActionType.FORFEIT:
            battle.get_combatant(action.acting_key)

        turn = battle.current_turn
        log.debug("Turn %d: resolving %s for participant %d", turn, action.type, action.participant_index)
        if self.logger:
            self.logger.log_action_received(turn, action.type.value, action.to_dict())

        match action.type:
            case ActionType.ATTACK:
                outcome = self._resolve_attack(action, turn)
            case ActionType.SWITCH:
                outcome = self._resolve_switch(action, turn)
            case ActionType.USE_ITEM:
                outcome = self._resolve_item(action)
            case ActionType.FORFEIT:
                outcome = self._resolve_forfeit(action, turn)
            case _:
                raise UnknownActionError(f"Unknown action type: {action.type}")

        outcome.turn_number = turn
        if self.logger:
            self.logger.log_action_resolved(turn, action.type.value, outcome.success, outcome.message)

        self._tick_statuses(outcome, turn)

        if not battle.is_over:
            check = self.termination.check(battle)
            if check.ended and check.result is not None:
                battle.end(check.result)

        if battle.is_over and battle.result is not None:
            outcome.battle_ended = True
            outcome.winner_id = battle.result.winner_id
            outcome.is_draw = battle.result.is_draw
            if self.logger:
                self.logger.log_battle_end(turn, battle.result)
            log.info(
                "Battle %s ended on turn %d (winner=%s, draw=%s)",
                battle.battle_id,
                turn,
                battle.result.winner_id,
                battle.result.is_draw,
            )

        battle.current_turn += 1
        if self.logger:
            self.logger.log_turn_advanced(turn, battle.teams)

        return outcome

    # ------------------------------------------------------------------
    # Attack
    # ------------------------------------------------------------------

    def _resolve_attack(self, action: Action, turn: int) -> ActionOutcome:
        """Use the acting combatant's move on the first living opponent."""
        attacker_key = action.acting_key
        attacker = self.battle.get_combatant(attacker_key)
        move = attacker.get_move(action.move_index)

        if move is None:
            return ActionOutcome(success=False, message="Invalid move selected")

        if attacker.is_fainted():
            return ActionOutcome(success=False, message=f"{attacker.name} is unable to battle!")

        target_key = self._find_target(action)
        if target_key is None:
            return ActionOutcome(success=False, message="There is no target to attack!")
        target = self.battle.get_combatant(target_key)

        if not combat_math.roll_accuracy(move, self.rng):
            if self.logger:
                self.logger.log_move_missed(turn, attacker_key, move.name)
            return ActionOutcome(success=True, message=f"{attacker.name}'s {move.name} missed!")

        effectiveness = combat_math.get_type_effectiveness(move.type, target.types)
        critical = combat_math.roll_critical(attacker, self.rng)
        damage = combat_math.calculate_damage(
            attacker,
            target,
            move,
            effectiveness,
            critical,
            self.rng,
            weather=self.battle.settings.weather,
        )

        before = CombatLogger.snapshot_state(target_key, target)
        target.apply_damage(damage)
        if self.logger:
            self.logger.log_health_change(
                LogEventType.DAMAGE_DEALT,
                turn,
                attacker_key,
                target_key,
                damage,
                f"{move.name} hit for {damage}",
                before,
                CombatLogger.snapshot_state(target_key, target),
                move_name=move.name,
            )

        outcome = ActionOutcome(success=True, message=self._attack_message(attacker, move, critical, effectiveness))
        outcome.add_effect(
            EffectDescriptor(
                type=EffectDescriptorType.DAMAGE,
                target=target_key,
                value=damage,
                message=f"{target.name} took {damage} damage!",
            )
        )

        for effect in move.effects:
            if combat_math.roll_chance(effect.chance, self.rng):
                self._apply_move_effect(effect, attacker_key, target_key, outcome, turn)

        self.battle.move_log.append(
            MoveRecord(
                turn_number=turn,
                participant_index=action.participant_index,
                slot_index=action.slot_index,
                move=move,
                target=target_key,
                damage=damage,
                effectiveness=effectiveness,
                critical=critical,
                effects=list(outcome.effects),
            )
        )
        return outcome

    def _find_target(self, action: Action) -> CombatantKey | None:
        """First living combatant on the opposing team."""
        team_index = self.battle.opponent_index(action.participant_index)
        if (
            action.target_index is not None
            and action.target_index != action.participant_index
            and 0 <= action.target_index < len(self.battle.teams)
        ):
            team_index = action.target_index

        slot = self.battle.first_alive_slot(team_index)
        if slot is None:
            return None
        return CombatantKey(team_index, slot)

    @staticmethod
    def _attack_message(attacker: Combatant, move: Move, critical: bool, effectiveness: float) -> str:
        message = f"{attacker.name} used {move.name}!"
        if critical:
            message += " Critical hit!"
        if effectiveness > 1:
            message += " It's super effective!"
        elif effectiveness < 1:
            message += " It's not very effective..."
        return message

    def _select(self, selector: EffectTarget, attacker_key: CombatantKey, target_key: CombatantKey) -> CombatantKey:
        # There is no field state yet, field effects land on the opponent
        if selector == EffectTarget.SELF:
            return attacker_key
        return target_key

    def _apply_move_effect(
        self,
        effect: MoveEffect,
        attacker_key: CombatantKey,
        target_key: CombatantKey,
        outcome: ActionOutcome,
        turn: int,
    ) -> None:
        """Apply one secondary effect whose chance roll succeeded."""
        attacker = self.battle.get_combatant(attacker_key)

        match effect:
            case PoisonEffect() | BurnEffect():
                key = self._select(effect.target, attacker_key, target_key)
                victim = self.battle.get_combatant(key)
                if isinstance(effect, PoisonEffect):
                    status_type, fraction, verb = StatusType.POISON, self.poison_fraction, "poisoned"
                else:
                    status_type, fraction, verb = StatusType.BURN, self.burn_fraction, "burned"
                magnitude = math.floor(victim.max_health * fraction)
                self.ledger.add(
                    key,
                    StatusEffect(
                        type=status_type,
                        duration=self.status_duration,
                        magnitude=magnitude,
                        source=attacker.id,
                    ),
                )
                if self.logger:
                    self.logger.log_status_applied(turn, key, status_type.value, magnitude, self.status_duration)
                outcome.add_effect(
                    EffectDescriptor(
                        type=EffectDescriptorType.STATUS,
                        target=key,
                        value=0,
                        message=f"{victim.name} was {verb}!",
                    )
                )

            case HealEffect():
                before = CombatLogger.snapshot_state(attacker_key, attacker)
                amount = math.floor(attacker.max_health * effect.magnitude / 100)
                healed = attacker.apply_heal(amount)
                if self.logger:
                    self.logger.log_health_change(
                        LogEventType.HEAL_APPLIED,
                        turn,
                        attacker_key,
                        attacker_key,
                        healed,
                        f"Healed {healed} HP",
                        before,
                        CombatLogger.snapshot_state(attacker_key, attacker),
                    )
                outcome.add_effect(
                    EffectDescriptor(
                        type=EffectDescriptorType.HEAL,
                        target=attacker_key,
                        value=healed,
                        message=f"{attacker.name} recovered {healed} HP!",
                    )
                )

            case StatChangeEffect():
                key = self._select(effect.target, attacker_key, target_key)
                subject = self.battle.get_combatant(key)
                delta = subject.modify_stat(effect.stat, effect.magnitude)
                if self.logger:
                    self.logger.log_stat_change(turn, key, effect.stat.value, delta)
                direction = "rose" if delta >= 0 else "fell"
                outcome.add_effect(
                    EffectDescriptor(
                        type=EffectDescriptorType.STAT_CHANGE,
                        target=key,
                        value=delta,
                        message=f"{subject.name}'s {effect.stat.value} {direction}!",
                    )
                )

    # ------------------------------------------------------------------
    # Switch / item / forfeit
    # ------------------------------------------------------------------

    def _resolve_switch(self, action: Action, turn: int) -> ActionOutcome:
        """Swap the acting slot with another slot on the same team."""
        team = self.battle.teams[action.participant_index]
        current_key = action.acting_key
        new_slot = action.switch_to_index

        if new_slot is None or new_slot < 0 or new_slot >= len(team) or new_slot == action.slot_index:
            return ActionOutcome(success=False, message="Cannot switch to that animal!")

        current = team[action.slot_index]
        incoming = team[new_slot]
        if incoming.is_fainted():
            return ActionOutcome(success=False, message="Cannot switch to that animal!")

        new_key = CombatantKey(action.participant_index, new_slot)
        team[action.slot_index], team[new_slot] = incoming, current
        self.ledger.swap(current_key, new_key)

        if self.logger:
            self.logger.log_switch(turn, current_key, new_key)

        return ActionOutcome(success=True, message=f"{current.name}, return! Go, {incoming.name}!")

    def _resolve_item(self, action: Action) -> ActionOutcome:
        """Items are not part of the engine yet; never mutates state."""
        return ActionOutcome(success=False, message="Items not yet implemented")

    def _resolve_forfeit(self, action: Action, turn: int) -> ActionOutcome:
        """End the battle immediately in the opponent's favour."""
        battle = self.battle
        forfeiter = battle.participants[action.participant_index]
        winner = battle.participants[battle.opponent_index(action.participant_index)]

        battle.end(
            BattleResult(
                is_draw=False,
                winner_id=winner.trainer_id,
                loser_id=forfeiter.trainer_id,
            )
        )
        if self.logger:
            self.logger.log_forfeit(turn, action.participant_index)

        return ActionOutcome(success=True, message=f"{forfeiter.trainer_name} forfeited the battle!")

    # ------------------------------------------------------------------
    # End of action
    # ------------------------------------------------------------------

    def _tick_statuses(self, outcome: ActionOutcome, turn: int) -> None:
        """Run the ledger tick and relay status damage as effect descriptors."""
        for tick in self.ledger.tick(self.battle.teams):
            victim = self.battle.get_combatant(tick.key)
            if tick.damage > 0:
                if self.logger:
                    self.logger.log_status_tick(turn, tick.key, tick.type.value, tick.damage)
                outcome.add_effect(
                    EffectDescriptor(
                        type=EffectDescriptorType.DAMAGE,
                        target=tick.key,
                        value=tick.damage,
                        message=f"{victim.name} is hurt by its {tick.type.value}!",
                    )
                )
            if tick.expired and self.logger:
                self.logger.log_status_expired(turn, tick.key, tick.type.value)
