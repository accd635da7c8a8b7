"""JSON codecs for the persisted game collection.

Players are stored in the shape shared with the remote document::

    [{"id", "number", "createdAt",
      "pitches": [{"id", "type", "swing": "yes"|"no", "result": "hit"|"miss"|null,
                   "hitPlacement": code|null, "hitType": code|null, "timestamp"}]}]

Usage:
    serializer = PlayersSerializer()
    stored = serializer.serialize(state.players)
    players = serializer.deserialize(stored)
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from pitch_counter.domain.pitch import (
    FieldPosition,
    Hit,
    HitType,
    Miss,
    NoSwing,
    PitchOutcome,
    PitchRecord,
    PitchType,
    PracticePitch,
    SwingResult,
)
from pitch_counter.domain.player import GameSnapshot, Player

if TYPE_CHECKING:
    from collections.abc import Sequence

T = TypeVar("T")
E = TypeVar("E")

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class SnapshotDecodeError(ValueError):
    """Raised when stored or remote JSON does not match the game schema."""


class Serializer(Protocol[T]):
    """Protocol for converting stored values to and from strings."""

    def serialize(self, value: T) -> str: ...

    def deserialize(self, data: str) -> T: ...


# -- Timestamps --------------------------------------------------------------


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def parse_timestamp(raw: Any) -> datetime:
    if not isinstance(raw, str):
        raise SnapshotDecodeError(f"timestamp must be a string, got {raw!r}")
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as e:
        raise SnapshotDecodeError(f"invalid timestamp {raw!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


# -- Pitches -----------------------------------------------------------------


def _enum(enum_type: type[E], raw: Any, field: str) -> E:
    try:
        return enum_type(raw)  # type: ignore[call-arg]
    except ValueError as e:
        raise SnapshotDecodeError(f"invalid {field} {raw!r}") from e


def pitch_to_dict(pitch: PitchRecord) -> dict[str, Any]:
    return {
        "id": pitch.id,
        "type": pitch.pitch_type.value,
        "swing": "yes" if pitch.swung else "no",
        "result": pitch.result.value if pitch.result is not None else None,
        "hitPlacement": pitch.hit_placement.value if pitch.hit_placement is not None else None,
        "hitType": pitch.hit_type.value if pitch.hit_type is not None else None,
        "timestamp": format_timestamp(pitch.timestamp),
    }


def _outcome_from_dict(raw: dict[str, Any]) -> PitchOutcome:
    swing = raw.get("swing")
    if swing == "no":
        return NoSwing()
    if swing != "yes":
        raise SnapshotDecodeError(f"invalid swing {swing!r}")
    result = _enum(SwingResult, raw.get("result"), "result")
    if result is SwingResult.MISS:
        return Miss()
    return Hit(
        placement=_enum(FieldPosition, raw.get("hitPlacement"), "hitPlacement"),
        hit_type=_enum(HitType, raw.get("hitType"), "hitType"),
    )


def pitch_from_dict(raw: dict[str, Any]) -> PitchRecord:
    if not isinstance(raw, dict):
        raise SnapshotDecodeError(f"pitch must be an object, got {raw!r}")
    try:
        return PitchRecord(
            id=str(raw["id"]),
            pitch_type=_enum(PitchType, raw["type"], "pitch type"),
            outcome=_outcome_from_dict(raw),
            timestamp=parse_timestamp(raw["timestamp"]),
        )
    except KeyError as e:
        raise SnapshotDecodeError(f"pitch missing field {e.args[0]!r}") from e


# -- Players -----------------------------------------------------------------


def player_to_dict(player: Player) -> dict[str, Any]:
    return {
        "id": player.id,
        "number": player.number,
        "createdAt": format_timestamp(player.created_at),
        "pitches": [pitch_to_dict(p) for p in player.pitches],
    }


def player_from_dict(raw: dict[str, Any]) -> Player:
    if not isinstance(raw, dict):
        raise SnapshotDecodeError(f"player must be an object, got {raw!r}")
    try:
        player_id = str(raw["id"])
        number = int(raw["number"])
    except KeyError as e:
        raise SnapshotDecodeError(f"player missing field {e.args[0]!r}") from e
    except (TypeError, ValueError) as e:
        raise SnapshotDecodeError(f"invalid player number {raw.get('number')!r}") from e
    created_raw = raw.get("createdAt")
    return Player(
        id=player_id,
        number=number,
        created_at=parse_timestamp(created_raw) if created_raw else _EPOCH,
        pitches=tuple(pitch_from_dict(p) for p in raw.get("pitches") or ()),
    )


def snapshot_to_document(snapshot: GameSnapshot) -> dict[str, Any]:
    document: dict[str, Any] = {}
    if snapshot.players is not None:
        document["players"] = [player_to_dict(p) for p in snapshot.players]
    if snapshot.game_name is not None:
        document["gameName"] = snapshot.game_name
    return document


def snapshot_from_document(document: dict[str, Any]) -> GameSnapshot:
    raw_players = document.get("players")
    if raw_players is not None and not isinstance(raw_players, list):
        raise SnapshotDecodeError("players must be a list")
    game_name = document.get("gameName")
    return GameSnapshot(
        players=tuple(player_from_dict(p) for p in raw_players) if raw_players is not None else None,
        game_name=str(game_name) if game_name is not None else None,
    )


class PlayersSerializer:
    """Serializer for the ordered player collection."""

    def serialize(self, value: Sequence[Player]) -> str:
        return json.dumps([player_to_dict(p) for p in value])

    def deserialize(self, data: str) -> tuple[Player, ...]:
        raw = _loads(data)
        if not isinstance(raw, list):
            raise SnapshotDecodeError("stored players must be a JSON list")
        return tuple(player_from_dict(p) for p in raw)


def practice_pitch_to_dict(pitch: PracticePitch) -> dict[str, Any]:
    return {
        "id": pitch.id,
        "pitchType": pitch.pitch_type.value,
        "x": pitch.x,
        "y": pitch.y,
        "percentX": pitch.percent_x,
        "percentY": pitch.percent_y,
        "timestamp": format_timestamp(pitch.timestamp),
    }


class PracticePitchListSerializer:
    """Serializer for the practice-pitch collection."""

    def serialize(self, value: Sequence[PracticePitch]) -> str:
        return json.dumps([practice_pitch_to_dict(p) for p in value])

    def deserialize(self, data: str) -> tuple[PracticePitch, ...]:
        raw = _loads(data)
        if not isinstance(raw, list):
            raise SnapshotDecodeError("stored practice pitches must be a JSON list")
        try:
            return tuple(
                PracticePitch(
                    id=str(p["id"]),
                    pitch_type=_enum(PitchType, p["pitchType"], "pitch type"),
                    percent_x=float(p["percentX"]),
                    percent_y=float(p["percentY"]),
                    timestamp=parse_timestamp(p["timestamp"]),
                    x=p.get("x"),
                    y=p.get("y"),
                )
                for p in raw
            )
        except KeyError as e:
            raise SnapshotDecodeError(f"practice pitch missing field {e.args[0]!r}") from e
        except SnapshotDecodeError:
            raise
        except (TypeError, ValueError) as e:
            raise SnapshotDecodeError(f"invalid practice pitch: {e}") from e


def _loads(data: str) -> Any:
    try:
        return json.loads(data)
    except json.JSONDecodeError as e:
        raise SnapshotDecodeError(f"invalid JSON: {e.msg}") from e
