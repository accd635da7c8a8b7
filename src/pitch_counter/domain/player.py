from dataclasses import dataclass, replace
from datetime import datetime

from pitch_counter.domain.pitch import PitchRecord

MIN_PLAYER_NUMBER = 1
MAX_PLAYER_NUMBER = 99


@dataclass(frozen=True)
class Player:
    id: str
    number: int
    created_at: datetime
    pitches: tuple[PitchRecord, ...] = ()

    @property
    def last_pitch(self) -> PitchRecord | None:
        return self.pitches[-1] if self.pitches else None

    def with_pitch(self, pitch: PitchRecord) -> "Player":
        return replace(self, pitches=(*self.pitches, pitch))


@dataclass(frozen=True)
class GameState:
    """Everything a game session owns; replaced wholesale on every mutation."""

    game_code: str
    players: tuple[Player, ...] = ()
    game_name: str = ""

    def find_player(self, player_id: str) -> Player | None:
        return next((p for p in self.players if p.id == player_id), None)

    def find_by_number(self, number: int) -> Player | None:
        return next((p for p in self.players if p.number == number), None)

    def with_player(self, player: Player) -> "GameState":
        return replace(self, players=(*self.players, player))

    def without_player(self, player_id: str) -> "GameState":
        return replace(self, players=tuple(p for p in self.players if p.id != player_id))

    def with_updated_player(self, player: Player) -> "GameState":
        return replace(self, players=tuple(player if p.id == player.id else p for p in self.players))


@dataclass(frozen=True)
class GameSnapshot:
    """A whole-collection view as exchanged with the remote store.

    A field left as ``None`` is absent from the document: it is not written on
    push, and the local value is kept when the snapshot is applied.
    """

    players: tuple[Player, ...] | None = None
    game_name: str | None = None
