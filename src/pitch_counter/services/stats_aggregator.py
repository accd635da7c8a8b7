"""Summaries derived from committed pitches.

Everything here is recomputed from the pitch records on each call; nothing is
cached between queries.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import TypeVar

from pitch_counter.domain.pitch import FieldPosition, HitType, PitchRecord, PitchType, SwingResult
from pitch_counter.domain.pitch_stats import GameStats, PitchTypeBreakdown, PlayerStats
from pitch_counter.domain.player import Player


K = TypeVar("K")

_ONE_DECIMAL = Decimal("0.1")


def _percentage(part: int, whole: int) -> float:
    """``part / whole`` as a percentage, halves rounded up to one decimal (6.25 -> 6.3)."""
    if whole == 0:
        return 0.0
    return float(Decimal(part / whole * 100).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def hit_rate(hits: int, swings: int) -> float:
    """Hits per swing as a percentage rounded to one decimal; 0.0 with no swings."""
    return _percentage(hits, swings)


def placement_percentage(position: FieldPosition, hit_placement_counts: dict[FieldPosition, int], total_hits: int) -> float:
    return _percentage(hit_placement_counts.get(position, 0), total_hits)


def _breakdown(pitches: Iterable[PitchRecord]) -> PitchTypeBreakdown:
    total = swings = hits = misses = 0
    for pitch in pitches:
        total += 1
        if pitch.swung:
            swings += 1
        if pitch.result is SwingResult.HIT:
            hits += 1
        elif pitch.result is SwingResult.MISS:
            misses += 1
    return PitchTypeBreakdown(total=total, swings=swings, hits=hits, misses=misses)


def _by_pitch_type(pitches: Sequence[PitchRecord]) -> dict[PitchType, PitchTypeBreakdown]:
    return {
        pitch_type: _breakdown(p for p in pitches if p.pitch_type is pitch_type)
        for pitch_type in PitchType
        if any(p.pitch_type is pitch_type for p in pitches)
    }


def _hit_placements(pitches: Iterable[PitchRecord]) -> dict[FieldPosition, int]:
    return dict(Counter(p.hit_placement for p in pitches if p.hit_placement is not None))


def _hit_types(pitches: Iterable[PitchRecord]) -> dict[HitType, int]:
    return dict(Counter(p.hit_type for p in pitches if p.hit_type is not None))


def per_player_stats(player: Player) -> PlayerStats:
    pitches = player.pitches
    overall = _breakdown(pitches)
    type_counts = Counter(p.pitch_type for p in pitches)
    return PlayerStats(
        total=overall.total,
        swings=overall.swings,
        hits=overall.hits,
        misses=overall.misses,
        hit_rate=hit_rate(overall.hits, overall.swings),
        per_pitch_type={pitch_type: type_counts.get(pitch_type, 0) for pitch_type in PitchType},
        per_pitch_type_breakdown=_by_pitch_type(pitches),
        hit_placement_counts=_hit_placements(pitches),
        hit_type_counts=_hit_types(pitches),
    )


def game_stats(players: Iterable[Player]) -> GameStats:
    pitches = [pitch for player in players for pitch in player.pitches]
    overall = _breakdown(pitches)
    return GameStats(
        total_pitches=overall.total,
        total_swings=overall.swings,
        total_hits=overall.hits,
        total_misses=overall.misses,
        hit_rate=hit_rate(overall.hits, overall.swings),
        per_pitch_type=_by_pitch_type(pitches),
        hit_placement_counts=_hit_placements(pitches),
        hit_type_counts=_hit_types(pitches),
    )


def recent_pitches(player: Player, n: int = 3) -> list[PitchRecord]:
    """The player's last ``n`` pitches, most recent first."""
    if n <= 0:
        return []
    return list(reversed(player.pitches[-n:]))


def ranked(counts: dict[K, int]) -> list[tuple[K, int]]:
    """Count entries ordered by count descending; ties keep insertion order."""
    return sorted(counts.items(), key=lambda item: -item[1])
