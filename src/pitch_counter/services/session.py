"""Session Controller: the command/query surface a UI drives.

The controller owns one ``GameState`` and at most one open recording session
(a player id plus its ``PendingSelection``). Every committed mutation is
written to the local store before the command returns and then handed to the
replicator, which pushes it remotely on a best-effort basis.
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pitch_counter.domain.errors import (
    CommitError,
    DuplicatePlayerNumber,
    IncompleteSelection,
    InvalidGameCode,
    InvalidPlayerNumber,
    NoActiveSession,
    PlayerNotFound,
    PlayerNumberError,
    SelectionError,
    SyncUnavailable,
)
from pitch_counter.domain.pitch import FieldPosition, HitType, PitchRecord, PitchType, PracticePitch, SwingResult
from pitch_counter.domain.player import MAX_PLAYER_NUMBER, MIN_PLAYER_NUMBER, GameSnapshot, GameState, Player
from pitch_counter.domain.result import Err, Ok, Result
from pitch_counter.domain.selection import (
    EMPTY_SELECTION,
    PendingSelection,
    build_record,
    choose_hit_placement,
    choose_hit_type,
    choose_result,
    choose_swing,
    choose_type,
    is_complete,
)
from pitch_counter.repos.game_repo import generate_game_code, is_valid_game_code
from pitch_counter.services.player_order import order_players
from pitch_counter.services.stats_aggregator import game_stats, per_player_stats

if TYPE_CHECKING:
    from collections.abc import Callable

    from pitch_counter.domain.pitch_stats import GameStats, PlayerStats
    from pitch_counter.repos.game_repo import LocalGameRepo
    from pitch_counter.sync.replicator import Replicator

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class StepOutcome:
    """Selection after a choice; ``committed`` is set when the choice completed the pitch."""

    selection: PendingSelection
    committed: PitchRecord | None = None


def parse_player_number(raw: str | int) -> Result[int, InvalidPlayerNumber]:
    text = str(raw).strip()
    invalid = InvalidPlayerNumber(
        message=f"Please enter a valid player number ({MIN_PLAYER_NUMBER}-{MAX_PLAYER_NUMBER})",
        raw=text,
    )
    if isinstance(raw, bool) or not (text.isascii() and text.isdecimal()):
        return Err(invalid)
    number = int(text)
    if not MIN_PLAYER_NUMBER <= number <= MAX_PLAYER_NUMBER:
        return Err(invalid)
    return Ok(number)


class SessionController:
    def __init__(
        self,
        repo: LocalGameRepo,
        replicator: Replicator,
        state: GameState,
        *,
        practice_pitches: tuple[PracticePitch, ...] = (),
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_id,
        rng: Callable[[int, int], int] = random.randint,
    ) -> None:
        self._repo = repo
        self._replicator = replicator
        self._state = state
        self._practice_pitches = practice_pitches
        self._clock = clock
        self._id_factory = id_factory
        self._rng = rng
        self._active_player_id: str | None = None
        self._selection = EMPTY_SELECTION

    @classmethod
    def load(
        cls,
        repo: LocalGameRepo,
        replicator: Replicator,
        *,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_id,
        rng: Callable[[int, int], int] = random.randint,
    ) -> SessionController:
        """Build a controller from local storage, then from the remote document if one exists."""
        state = GameState(
            game_code=repo.load_or_create_game_code(rng),
            players=repo.load_players(),
            game_name=repo.load_game_name(),
        )
        controller = cls(
            repo,
            replicator,
            state,
            practice_pitches=repo.load_practice_pitches(),
            clock=clock,
            id_factory=id_factory,
            rng=rng,
        )
        if replicator.enabled:
            controller.pull_remote()
        return controller

    # -- Queries -------------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def selection(self) -> PendingSelection:
        return self._selection

    def active_player(self) -> Player | None:
        if self._active_player_id is None:
            return None
        return self._state.find_player(self._active_player_id)

    def ordered_players(self) -> list[Player]:
        return order_players(self._state.players)

    def player_stats(self, player_id: str) -> PlayerStats | None:
        player = self._state.find_player(player_id)
        return per_player_stats(player) if player is not None else None

    def game_stats(self) -> GameStats:
        return game_stats(self._state.players)

    def practice_pitches(self) -> tuple[PracticePitch, ...]:
        return self._practice_pitches

    # -- Player commands -----------------------------------------------------

    def add_player(self, raw_number: str | int) -> Result[Player, PlayerNumberError]:
        parsed = parse_player_number(raw_number)
        if isinstance(parsed, Err):
            return parsed
        number = parsed.value
        if self._state.find_by_number(number) is not None:
            return Err(DuplicatePlayerNumber(message=f"Player #{number} already exists", number=number))
        player = Player(id=self._id_factory(), number=number, created_at=self._clock())
        self._state = self._state.with_player(player)
        self._persist_players()
        logger.info("Added player #%d", number)
        return Ok(player)

    def delete_player(self, player_id: str) -> None:
        player = self._state.find_player(player_id)
        if player is None:
            logger.debug("Ignoring delete of unknown player %s", player_id)
            return
        if self._active_player_id == player_id:
            self.cancel_session()
        self._state = self._state.without_player(player_id)
        self._persist_players()
        logger.info("Removed player #%d", player.number)

    # -- Recording session ---------------------------------------------------

    def open_session(self, player_id: str) -> Result[Player, PlayerNotFound]:
        player = self._state.find_player(player_id)
        if player is None:
            return Err(PlayerNotFound(message=f"Player {player_id} no longer exists", player_id=player_id))
        self._active_player_id = player_id
        self._selection = EMPTY_SELECTION
        return Ok(player)

    def cancel_session(self) -> None:
        """Discard the pending selection; committed pitches are untouched."""
        self._active_player_id = None
        self._selection = EMPTY_SELECTION

    def choose_type(self, pitch_type: PitchType) -> Result[StepOutcome, SelectionError]:
        session = self._require_session()
        if isinstance(session, Err):
            return session
        return self._advance(session.value, choose_type(self._selection, pitch_type))

    def choose_swing(self, swung: bool) -> Result[StepOutcome, SelectionError]:
        session = self._require_session()
        if isinstance(session, Err):
            return session
        chosen = choose_swing(self._selection, swung)
        if isinstance(chosen, Err):
            return chosen
        return self._advance(session.value, chosen.value)

    def choose_result(self, result: SwingResult) -> Result[StepOutcome, SelectionError]:
        session = self._require_session()
        if isinstance(session, Err):
            return session
        chosen = choose_result(self._selection, result)
        if isinstance(chosen, Err):
            return chosen
        return self._advance(session.value, chosen.value)

    def choose_hit_placement(self, placement: FieldPosition) -> Result[StepOutcome, SelectionError]:
        session = self._require_session()
        if isinstance(session, Err):
            return session
        chosen = choose_hit_placement(self._selection, placement)
        if isinstance(chosen, Err):
            return chosen
        return self._advance(session.value, chosen.value)

    def choose_hit_type(self, hit_type: HitType) -> Result[StepOutcome, SelectionError]:
        session = self._require_session()
        if isinstance(session, Err):
            return session
        chosen = choose_hit_type(self._selection, hit_type)
        if isinstance(chosen, Err):
            return chosen
        return self._advance(session.value, chosen.value)

    def commit(self) -> Result[PitchRecord, CommitError]:
        """Append the pending pitch to the open player; a no-op until the selection is complete."""
        session = self._require_session()
        if isinstance(session, Err):
            return session
        return self._commit_for(session.value)

    def _require_session(self) -> Result[Player, NoActiveSession | PlayerNotFound]:
        if self._active_player_id is None:
            return Err(NoActiveSession(message="No player is open for recording"))
        player = self._state.find_player(self._active_player_id)
        if player is None:
            stale_id = self._active_player_id
            self.cancel_session()
            return Err(PlayerNotFound(message=f"Player {stale_id} no longer exists", player_id=stale_id))
        return Ok(player)

    def _advance(self, player: Player, selection: PendingSelection) -> Result[StepOutcome, SelectionError]:
        self._selection = selection
        if not is_complete(selection):
            return Ok(StepOutcome(selection=selection))
        committed = self._commit_for(player)
        assert isinstance(committed, Ok), "a complete selection always builds a record"
        return Ok(StepOutcome(selection=self._selection, committed=committed.value))

    def _commit_for(self, player: Player) -> Result[PitchRecord, IncompleteSelection]:
        built = build_record(self._selection, pitch_id=self._id_factory(), timestamp=self._clock())
        if isinstance(built, Err):
            return built
        record = built.value
        self._state = self._state.with_updated_player(player.with_pitch(record))
        self._selection = EMPTY_SELECTION
        self._persist_players()
        logger.info("Recorded %s for player #%d", record.describe(), player.number)
        return Ok(record)

    # -- Game management -----------------------------------------------------

    def set_game_name(self, name: str) -> bool:
        name = name.strip()
        if not name:
            return False
        self._state = replace(self._state, game_name=name)
        self._repo.save_game_name(name)
        self._replicator.publish(self._state.game_code, GameSnapshot(game_name=name))
        return True

    def new_game(self) -> str:
        """Start over under a fresh game code with no players and no name."""
        self.cancel_session()
        self._state = GameState(game_code=generate_game_code(self._rng))
        self._repo.save_game_code(self._state.game_code)
        self._repo.save_players(())
        self._repo.save_game_name("")
        self._replicator.publish(self._state.game_code, GameSnapshot(players=(), game_name=""))
        logger.info("Started new game %s", self._state.game_code)
        return self._state.game_code

    def join_game(self, raw_code: str) -> Result[str, InvalidGameCode]:
        code = "".join(ch for ch in raw_code if ch.isdigit())
        if not is_valid_game_code(code):
            return Err(InvalidGameCode(message="Please enter a valid 6-digit Game Code", raw=raw_code))
        self._state = replace(self._state, game_code=code)
        self._repo.save_game_code(code)
        logger.info("Switched to game %s", code)
        if self._replicator.enabled:
            self.pull_remote()
        return Ok(code)

    def sync_now(self) -> Result[None, SyncUnavailable]:
        return self._replicator.push_now(self._state.game_code, self._snapshot())

    def pull_remote(self) -> Result[bool, SyncUnavailable]:
        """Replace local state with the remote document; ``Ok(False)`` when none exists."""
        match self._replicator.pull(self._state.game_code):
            case Err(e):
                return Err(e)
            case Ok(None):
                return Ok(False)
            case Ok(snapshot):
                self.apply_remote_snapshot(snapshot)
                return Ok(True)

    def apply_remote_snapshot(self, snapshot: GameSnapshot) -> None:
        """Accept an externally written snapshot as the new source of truth, all at once."""
        state = self._state
        if snapshot.players is not None:
            state = replace(state, players=snapshot.players)
        if snapshot.game_name is not None:
            state = replace(state, game_name=snapshot.game_name)
        self._state = state
        if self._active_player_id is not None and state.find_player(self._active_player_id) is None:
            self.cancel_session()
        if snapshot.players is not None:
            self._repo.save_players(state.players)
        if snapshot.game_name is not None:
            self._repo.save_game_name(state.game_name)
        logger.info("Applied remote snapshot for game %s", state.game_code)

    # -- Practice pitches ----------------------------------------------------

    def record_practice_pitch(
        self,
        pitch_type: PitchType,
        percent_x: float,
        percent_y: float,
        *,
        x: float | None = None,
        y: float | None = None,
    ) -> PracticePitch:
        pitch = PracticePitch(
            id=self._id_factory(),
            pitch_type=pitch_type,
            percent_x=percent_x,
            percent_y=percent_y,
            timestamp=self._clock(),
            x=x,
            y=y,
        )
        self._practice_pitches = (*self._practice_pitches, pitch)
        self._repo.save_practice_pitches(self._practice_pitches)
        return pitch

    def clear_practice_pitches(self) -> None:
        self._practice_pitches = ()
        self._repo.save_practice_pitches(())

    def close(self) -> None:
        self._replicator.close()

    # -- Persistence ---------------------------------------------------------

    def _snapshot(self) -> GameSnapshot:
        return GameSnapshot(players=self._state.players, game_name=self._state.game_name)

    def _persist_players(self) -> None:
        self._repo.save_players(self._state.players)
        self._replicator.publish(self._state.game_code, self._snapshot())
