from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import TypeAlias


class PitchType(StrEnum):
    FASTBALL = "fastball"
    CURVEBALL = "curveball"
    SLIDER = "slider"
    CHANGEUP = "changeup"
    CUTTER = "cutter"
    SPLITTER = "splitter"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def marker_color(self) -> str:
        return _PITCH_TYPE_COLORS[self]


_PITCH_TYPE_COLORS: dict[PitchType, str] = {
    PitchType.FASTBALL: "#FF4444",
    PitchType.CURVEBALL: "#4444FF",
    PitchType.SLIDER: "#44FF44",
    PitchType.CHANGEUP: "#FF8844",
    PitchType.CUTTER: "#8844FF",
    PitchType.SPLITTER: "#FF44FF",
}


class SwingResult(StrEnum):
    HIT = "hit"
    MISS = "miss"


class HitType(StrEnum):
    LINE_DRIVE = "line-drive"
    GROUND_BALL = "ground-ball"
    FLY_BALL = "fly-ball"
    FOUL = "foul"

    @property
    def display_name(self) -> str:
        return self.value.replace("-", " ").title()


class FieldPosition(StrEnum):
    PITCHER = "P"
    CATCHER = "C"
    FIRST_BASE = "1B"
    SECOND_BASE = "2B"
    THIRD_BASE = "3B"
    SHORTSTOP = "SS"
    LEFT_FIELD = "LF"
    CENTER_FIELD = "CF"
    RIGHT_FIELD = "RF"

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()


# -- Outcome variants --------------------------------------------------------


@dataclass(frozen=True)
class NoSwing:
    pass


@dataclass(frozen=True)
class Miss:
    pass


@dataclass(frozen=True)
class Hit:
    placement: FieldPosition
    hit_type: HitType


PitchOutcome: TypeAlias = NoSwing | Miss | Hit


@dataclass(frozen=True)
class PitchRecord:
    """A committed pitch. Field-presence rules follow from the outcome variant."""

    id: str
    pitch_type: PitchType
    outcome: PitchOutcome
    timestamp: datetime

    @property
    def swung(self) -> bool:
        return not isinstance(self.outcome, NoSwing)

    @property
    def result(self) -> SwingResult | None:
        match self.outcome:
            case Hit():
                return SwingResult.HIT
            case Miss():
                return SwingResult.MISS
            case _:
                return None

    @property
    def hit_placement(self) -> FieldPosition | None:
        return self.outcome.placement if isinstance(self.outcome, Hit) else None

    @property
    def hit_type(self) -> HitType | None:
        return self.outcome.hit_type if isinstance(self.outcome, Hit) else None

    def describe(self) -> str:
        match self.outcome:
            case NoSwing():
                return f"{self.pitch_type.display_name} - Didn't Swing"
            case Miss():
                return f"{self.pitch_type.display_name} - Swung - Miss"
            case Hit(placement=placement, hit_type=hit_type):
                return f"{self.pitch_type.display_name} - Swung - Hit - {placement} ({hit_type.display_name})"
        raise AssertionError(f"unhandled outcome {self.outcome!r}")


@dataclass(frozen=True)
class PracticePitch:
    id: str
    pitch_type: PitchType
    percent_x: float
    percent_y: float
    timestamp: datetime
    x: float | None = None
    y: float | None = None

    def __post_init__(self) -> None:
        for name, value in (("percent_x", self.percent_x), ("percent_y", self.percent_y)):
            if not 0.0 <= value <= 100.0:
                raise ValueError(f"{name} must be within [0, 100], got {value}")

    @property
    def marker_color(self) -> str:
        return self.pitch_type.marker_color
