import logging
import random
from collections.abc import Callable, Sequence

from pitch_counter.domain.pitch import PracticePitch
from pitch_counter.domain.player import Player
from pitch_counter.repos.kv_store import KeyValueStore
from pitch_counter.repos.serialization import PlayersSerializer, PracticePitchListSerializer, Serializer

logger = logging.getLogger(__name__)

PLAYERS_KEY = "pitchingCounterPlayers"
GAME_NAME_KEY = "pitchingCounterGameName"
GAME_CODE_KEY = "pitchingCounterGameId"
PRACTICE_PITCHES_KEY = "practicePitches"


def generate_game_code(rng: Callable[[int, int], int] = random.randint) -> str:
    """A random six-digit code in 100000-999999."""
    return str(rng(100000, 999999))


def is_valid_game_code(code: str) -> bool:
    return len(code) == 6 and code.isdigit()


class LocalGameRepo:
    """Game data kept in the local key-value store."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        players_serializer: Serializer[Sequence[Player]] | None = None,
        practice_serializer: Serializer[Sequence[PracticePitch]] | None = None,
    ) -> None:
        self._store = store
        self._players_serializer = players_serializer or PlayersSerializer()
        self._practice_serializer = practice_serializer or PracticePitchListSerializer()

    def load_players(self) -> tuple[Player, ...]:
        stored = self._store.get(PLAYERS_KEY)
        if stored is None:
            return ()
        return tuple(self._players_serializer.deserialize(stored))

    def save_players(self, players: Sequence[Player]) -> None:
        self._store.put(PLAYERS_KEY, self._players_serializer.serialize(players))
        logger.debug("Saved %d players locally", len(players))

    def load_game_name(self) -> str:
        return self._store.get(GAME_NAME_KEY) or ""

    def save_game_name(self, name: str) -> None:
        if name:
            self._store.put(GAME_NAME_KEY, name)
        else:
            self._store.delete(GAME_NAME_KEY)

    def load_or_create_game_code(self, rng: Callable[[int, int], int] = random.randint) -> str:
        code = self._store.get(GAME_CODE_KEY)
        if code is None:
            code = generate_game_code(rng)
            self._store.put(GAME_CODE_KEY, code)
            logger.info("Created game code %s", code)
        return code

    def save_game_code(self, code: str) -> None:
        self._store.put(GAME_CODE_KEY, code)

    def load_practice_pitches(self) -> tuple[PracticePitch, ...]:
        stored = self._store.get(PRACTICE_PITCHES_KEY)
        if stored is None:
            return ()
        return tuple(self._practice_serializer.deserialize(stored))

    def save_practice_pitches(self, pitches: Sequence[PracticePitch]) -> None:
        self._store.put(PRACTICE_PITCHES_KEY, self._practice_serializer.serialize(pitches))
