from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True)
class PitchCounterError:
    message: str


@dataclass(frozen=True)
class InvalidPlayerNumber(PitchCounterError):
    raw: str


@dataclass(frozen=True)
class DuplicatePlayerNumber(PitchCounterError):
    number: int


@dataclass(frozen=True)
class IncompleteSelection(PitchCounterError):
    pass


@dataclass(frozen=True)
class SelectionOutOfOrder(PitchCounterError):
    step: str


@dataclass(frozen=True)
class NoActiveSession(PitchCounterError):
    pass


@dataclass(frozen=True)
class PlayerNotFound(PitchCounterError):
    player_id: str


@dataclass(frozen=True)
class InvalidGameCode(PitchCounterError):
    raw: str


@dataclass(frozen=True)
class SyncUnavailable(PitchCounterError):
    game_code: str


PlayerNumberError: TypeAlias = InvalidPlayerNumber | DuplicatePlayerNumber
SelectionError: TypeAlias = SelectionOutOfOrder | NoActiveSession | PlayerNotFound
CommitError: TypeAlias = IncompleteSelection | NoActiveSession | PlayerNotFound
