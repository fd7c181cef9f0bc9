"""Battle service - drives a battle from start to result and builds new battles."""

import asyncio
import logging
import random
import string
import time
from collections.abc import Awaitable, Callable

from ..ai.base import AIDifficulty, AIHandle, TrainerKind
from ..ai.heuristic import create_ai
from ..config import Settings, get_settings
from ..engine.logging import CombatLogger
from ..engine.resolver import ActionResolver
from ..engine.termination import TerminationDetector
from ..engine.types import Action, ActionOutcome
from ..errors import BattleError, InvalidParticipantError, InvalidStateError
from ..models.battle import Battle, BattleResult, BattleSettings, Participant
from ..models.creatures import Combatant
from ..models.enums import BattleKind, BattleState
from .presenter import BattlePresenter

log = logging.getLogger("habitat_battles.services")

AIFactory = Callable[..., AIHandle]
BattleEndCallback = Callable[[BattleResult], None]


def trainer_kind_for(kind: BattleKind) -> TrainerKind:
    """Which AI brain an opponent gets in a given kind of battle."""
    match kind:
        case BattleKind.WILD:
            return TrainerKind.WILD
        case BattleKind.GYM:
            return TrainerKind.GYM
        case _:
            return TrainerKind.TOURNAMENT


class BattleOrchestrator:
    """Runs the turn loop for one battle.

    Participants act in index order. Human participants are awaited until
    ``submit_action`` is called for them; AI participants wait out their
    thinking time and then act on their own.
    """

    def __init__(
        self,
        battle: Battle,
        ai_factory: AIFactory = create_ai,
        presenter: BattlePresenter | None = None,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        logger: CombatLogger | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            battle: Battle to drive
            ai_factory: Builds the AI for each AI-controlled participant
            presenter: Optional BattlePresenter for messages and effects
            settings: Engine settings (loaded from the environment if omitted)
            rng: Random source shared by the resolver and the AIs
            logger: Optional structured combat logger
            sleep: Awaitable used for AI thinking delays
        """
        self.settings = settings or get_settings()
        self.rng = rng or random.Random(self.settings.rng_seed)
        self.presenter = presenter
        self.sleep = sleep

        self.resolver = ActionResolver(
            battle,
            rng=self.rng,
            logger=logger,
            termination=TerminationDetector(self.settings.winner_experience, self.settings.winner_currency),
            poison_fraction=self.settings.poison_fraction,
            burn_fraction=self.settings.burn_fraction,
            status_duration=self.settings.status_duration,
        )

        trainer_kind = trainer_kind_for(battle.kind)
        self.ais: dict[int, AIHandle] = {}
        for index, participant in enumerate(battle.participants):
            if participant.is_ai:
                difficulty = participant.ai_difficulty or AIDifficulty.NOVICE
                self.ais[index] = ai_factory(battle, index, trainer_kind, difficulty, rng=self.rng)

        self._pending: asyncio.Future[ActionOutcome | None] | None = None
        self._awaiting: int | None = None
        self._end_callbacks: list[BattleEndCallback] = []
        self._ai_failures: dict[int, int] = {}

    @property
    def battle(self) -> Battle:
        return self.resolver.get_battle()

    @property
    def awaiting_participant(self) -> int | None:
        """Index of the human participant the loop is waiting on."""
        return self._awaiting

    def is_ai_participant(self, participant_index: int) -> bool:
        return participant_index in self.ais

    def on_battle_end(self, callback: BattleEndCallback) -> None:
        """Register a callback invoked with the result when the battle ends."""
        self._end_callbacks.append(callback)

    def thinking_time(self, difficulty: int) -> float:
        """AI thinking delay in seconds."""
        return self.settings.thinking_time_ms(difficulty) / 1000

    async def run(self) -> BattleResult | None:
        """Drive the battle until it ends.

        Returns:
            The battle result
        """
        battle = self.battle
        if battle.state == BattleState.WAITING:
            battle.start()

        log.info("Battle %s started (%s)", battle.battle_id, battle.kind.value)

        while battle.state == BattleState.IN_PROGRESS:
            for index in range(len(battle.participants)):
                if battle.is_over:
                    break
                if self.is_ai_participant(index):
                    await self._take_ai_turn(index)
                else:
                    await self._wait_for_human(index)

        self._finish()
        return battle.result

    async def submit_action(self, action: Action) -> ActionOutcome:
        """Resolve a human participant's action and hand the turn on.

        Protocol errors from the resolver propagate to the caller and the
        loop keeps waiting for a valid action.

        Args:
            action: Action for the participant the loop is waiting on

        Returns:
            ActionOutcome of the resolved action

        Raises:
            InvalidParticipantError: If the action is for an AI or out of turn
            InvalidStateError: If the loop is not waiting for an action
        """
        if self.is_ai_participant(action.participant_index):
            raise InvalidParticipantError(f"Participant {action.participant_index} is AI controlled")
        if self._pending is None or self._pending.done():
            raise InvalidStateError("No action is awaited right now")
        if action.participant_index != self._awaiting:
            raise InvalidParticipantError(f"It is not participant {action.participant_index}'s turn")

        outcome = self._resolve(action)
        # The turn is used up; further submits are rejected while effects play
        self._awaiting = None
        await self._relay(outcome, action.participant_index)

        if self._pending is not None and not self._pending.done():
            self._pending.set_result(outcome)
        return outcome

    async def forfeit(self, participant_index: int) -> ActionOutcome:
        """Concede on behalf of a human participant, in or out of turn."""
        if self.is_ai_participant(participant_index):
            raise InvalidParticipantError(f"Participant {participant_index} is AI controlled")

        outcome = self._resolve(Action.forfeit(participant_index))
        self._awaiting = None
        await self._relay(outcome, participant_index)

        # Wake the loop if it is parked on some participant
        if self._pending is not None and not self._pending.done():
            self._pending.set_result(outcome)
        return outcome

    def notify_ai_of_opponent_action(self, participant_index: int, action: Action) -> None:
        """Let a learning AI observe an opponent's action."""
        ai = self.ais.get(participant_index)
        learn = getattr(ai, "learn_from_opponent", None)
        if callable(learn):
            learn(action)

    def _resolve(self, action: Action) -> ActionOutcome:
        try:
            outcome = self.resolver.resolve(action)
        except BattleError:
            log.exception("Failed to resolve %s for participant %d", action.type.value, action.participant_index)
            raise

        for index in self.ais:
            if index != action.participant_index:
                self.notify_ai_of_opponent_action(index, action)
        return outcome

    async def _wait_for_human(self, participant_index: int) -> None:
        self._pending = asyncio.get_running_loop().create_future()
        self._awaiting = participant_index
        try:
            await self._pending
        finally:
            self._pending = None
            self._awaiting = None

    async def _take_ai_turn(self, participant_index: int) -> None:
        participant = self.battle.participants[participant_index]
        await self.sleep(self.thinking_time(participant.ai_difficulty or AIDifficulty.NOVICE))

        # A human may have forfeited while the AI was thinking
        if self.battle.is_over:
            return

        ai = self.ais[participant_index]
        ai.update_state(self.battle)
        action = ai.get_best_action()

        try:
            outcome = self._resolve(action)
        except BattleError:
            failures = self._ai_failures.get(participant_index, 0) + 1
            self._ai_failures[participant_index] = failures
            if failures < self.settings.ai_max_failed_actions:
                # Skip the AI's turn, the battle stays as it was
                return
            log.warning(
                "AI for participant %d failed %d actions in a row, conceding", participant_index, failures
            )
            action = Action.forfeit(participant_index)
            outcome = self._resolve(action)

        self._ai_failures[participant_index] = 0

        await self._relay(outcome, participant_index)

    async def _relay(self, outcome: ActionOutcome, participant_index: int) -> None:
        if self.presenter is None:
            return
        source = self.battle.participants[participant_index].trainer_id
        self.presenter.show_message(outcome.message)
        for effect in outcome.effects:
            await self.presenter.play_effect(effect, source)

    def _finish(self) -> None:
        battle = self.battle
        result = battle.result
        if result is None:
            return

        log.info(
            "Battle %s finished after %d turns (winner=%s)",
            battle.battle_id,
            battle.current_turn - 1,
            result.winner_id or "draw",
        )
        if self.presenter is not None:
            self.presenter.show_result(result, battle)
        for callback in self._end_callbacks:
            callback(result)


def generate_battle_id() -> str:
    """Unique battle id: millisecond timestamp plus a random suffix."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"battle_{int(time.time() * 1000)}_{suffix}"


def create_trainer_battle(
    player_id: str,
    player_name: str,
    player_team: list[Combatant],
    opponent_id: str,
    opponent_name: str,
    opponent_team: list[Combatant],
    opponent_is_ai: bool = True,
    opponent_difficulty: int = AIDifficulty.NOVICE,
    kind: BattleKind = BattleKind.TRAINER,
    battle_settings: BattleSettings | None = None,
    settings: Settings | None = None,
) -> Battle:
    """Build a two-sided battle between the player and another trainer.

    Args:
        player_id: Trainer id of the player (participant 0)
        player_name: Display name of the player
        player_team: Player's combatants, lead first
        opponent_id: Trainer id of the opponent (participant 1)
        opponent_name: Display name of the opponent
        opponent_team: Opponent's combatants, lead first
        opponent_is_ai: Whether the opponent is AI controlled
        opponent_difficulty: AI difficulty, 1-5
        kind: Kind of encounter
        battle_settings: Battle rules (defaults derived from settings)
        settings: Engine settings

    Returns:
        Battle in progress, ready to hand to a BattleOrchestrator
    """
    settings = settings or get_settings()
    if battle_settings is None:
        battle_settings = BattleSettings(
            max_team_size=settings.max_team_size,
            turn_time_limit=settings.turn_time_limit,
        )

    participants = [
        Participant(trainer_id=player_id, trainer_name=player_name, team_index=0),
        Participant(
            trainer_id=opponent_id,
            trainer_name=opponent_name,
            team_index=1,
            is_ai=opponent_is_ai,
            ai_difficulty=opponent_difficulty if opponent_is_ai else None,
        ),
    ]

    battle = Battle(
        battle_id=generate_battle_id(),
        kind=kind,
        participants=participants,
        teams=[player_team, opponent_team],
        settings=battle_settings,
    )
    log.debug("Created %s battle %s: %s vs %s", kind.value, battle.battle_id, player_name, opponent_name)
    return battle


def create_wild_battle(
    player_id: str,
    player_name: str,
    player_team: list[Combatant],
    wild: Combatant,
    settings: Settings | None = None,
) -> Battle:
    """Build a battle against a single wild combatant.

    Items and switching are disallowed and the wild side plays at the lowest
    AI difficulty.
    """
    settings = settings or get_settings()
    battle_settings = BattleSettings(
        max_team_size=settings.max_team_size,
        turn_time_limit=settings.turn_time_limit,
        allow_items=False,
        allow_switching=False,
    )
    return create_trainer_battle(
        player_id=player_id,
        player_name=player_name,
        player_team=player_team,
        opponent_id=f"wild-{int(time.time() * 1000)}",
        opponent_name="Wild",
        opponent_team=[wild],
        opponent_is_ai=True,
        opponent_difficulty=AIDifficulty.NOVICE,
        kind=BattleKind.WILD,
        battle_settings=battle_settings,
        settings=settings,
    )
