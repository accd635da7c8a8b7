"""Display order for the player list.

The player who just received a pitch sits on top; the player who was on top
before that drops to the very bottom. Players with no pitches yet keep their
creation order right under the top slot, followed by the remaining pitched
players oldest-first.

Equal last-pitch times break on player id. Equal creation times keep the
collection (insertion) order.
"""

from collections.abc import Iterable
from datetime import datetime

from pitch_counter.domain.player import Player


def _last_pitch_time(player: Player) -> datetime:
    assert player.last_pitch is not None
    return player.last_pitch.timestamp


def _last_pitch_key(player: Player) -> tuple[datetime, str]:
    return _last_pitch_time(player), player.id


def order_players(players: Iterable[Player]) -> list[Player]:
    with_pitches: list[Player] = []
    without_pitches: list[Player] = []
    for player in players:
        (with_pitches if player.pitches else without_pitches).append(player)

    # Stable sorts: id order survives among equal timestamps.
    with_pitches.sort(key=lambda p: p.id)
    with_pitches.sort(key=_last_pitch_time, reverse=True)
    without_pitches.sort(key=lambda p: p.created_at)

    if not with_pitches:
        return without_pitches
    if len(with_pitches) == 1:
        return [with_pitches[0], *without_pitches]

    most_recent, second_most_recent, *middle = with_pitches
    middle.sort(key=_last_pitch_key)
    return [most_recent, *without_pitches, *middle, second_most_recent]
