from datetime import UTC, datetime, timedelta

from pitch_counter.domain.pitch import FieldPosition, Hit, HitType, Miss, NoSwing, PitchOutcome, PitchRecord, PitchType
from pitch_counter.domain.player import Player

BASE_TIME = datetime(2025, 4, 12, 18, 0, tzinfo=UTC)


def at(minutes: float) -> datetime:
    return BASE_TIME + timedelta(minutes=minutes)


def make_pitch(
    pitch_id: str = "p1",
    *,
    pitch_type: PitchType = PitchType.FASTBALL,
    outcome: PitchOutcome | None = None,
    minute: float = 0,
) -> PitchRecord:
    return PitchRecord(id=pitch_id, pitch_type=pitch_type, outcome=outcome or NoSwing(), timestamp=at(minute))


def make_hit(
    pitch_id: str = "h1",
    *,
    pitch_type: PitchType = PitchType.FASTBALL,
    placement: FieldPosition = FieldPosition.SHORTSTOP,
    hit_type: HitType = HitType.GROUND_BALL,
    minute: float = 0,
) -> PitchRecord:
    return make_pitch(pitch_id, pitch_type=pitch_type, outcome=Hit(placement=placement, hit_type=hit_type), minute=minute)


def make_miss(pitch_id: str = "m1", *, pitch_type: PitchType = PitchType.FASTBALL, minute: float = 0) -> PitchRecord:
    return make_pitch(pitch_id, pitch_type=pitch_type, outcome=Miss(), minute=minute)


def make_player(
    player_id: str = "a",
    number: int = 7,
    *,
    created_minute: float = 0,
    pitches: tuple[PitchRecord, ...] = (),
) -> Player:
    return Player(id=player_id, number=number, created_at=at(created_minute), pitches=pitches)


class StepClock:
    """Deterministic clock that advances one minute per call."""

    def __init__(self, start: datetime = BASE_TIME) -> None:
        self._next = start

    def __call__(self) -> datetime:
        now = self._next
        self._next = now + timedelta(minutes=1)
        return now


class SequentialIds:
    def __init__(self, prefix: str = "id") -> None:
        self._prefix = prefix
        self._count = 0

    def __call__(self) -> str:
        self._count += 1
        return f"{self._prefix}{self._count}"
