from dataclasses import dataclass, field

from pitch_counter.domain.pitch import FieldPosition, HitType, PitchType


@dataclass(frozen=True)
class PitchTypeBreakdown:
    total: int = 0
    swings: int = 0
    hits: int = 0
    misses: int = 0


@dataclass(frozen=True)
class PlayerStats:
    total: int
    swings: int
    hits: int
    misses: int
    hit_rate: float
    per_pitch_type: dict[PitchType, int] = field(default_factory=dict)
    per_pitch_type_breakdown: dict[PitchType, PitchTypeBreakdown] = field(default_factory=dict)
    hit_placement_counts: dict[FieldPosition, int] = field(default_factory=dict)
    hit_type_counts: dict[HitType, int] = field(default_factory=dict)

    @property
    def no_swings(self) -> int:
        return self.total - self.swings


@dataclass(frozen=True)
class GameStats:
    total_pitches: int
    total_swings: int
    total_hits: int
    total_misses: int
    hit_rate: float
    per_pitch_type: dict[PitchType, PitchTypeBreakdown] = field(default_factory=dict)
    hit_placement_counts: dict[FieldPosition, int] = field(default_factory=dict)
    hit_type_counts: dict[HitType, int] = field(default_factory=dict)
