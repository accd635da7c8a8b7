"""In-progress classification of a single pitch.

A ``PendingSelection`` moves through

    EMPTY -> TYPE_CHOSEN -> SWING_CHOSEN -> RESULT_CHOSEN -> HIT_DETAILS_PARTIAL -> COMPLETE

Each ``choose_*`` function returns a new selection (or an error when its
prerequisite is missing, leaving the caller's selection untouched). A
selection is complete when a pitch type and swing are set and either the
batter did not swing, swung and missed, or hit with both placement and hit
type chosen. Callers commit the instant ``is_complete`` becomes true.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum

from pitch_counter.domain.errors import IncompleteSelection, SelectionOutOfOrder
from pitch_counter.domain.pitch import (
    FieldPosition,
    Hit,
    HitType,
    Miss,
    NoSwing,
    PitchOutcome,
    PitchRecord,
    PitchType,
    SwingResult,
)
from pitch_counter.domain.result import Err, Ok, Result


class SelectionState(StrEnum):
    EMPTY = "empty"
    TYPE_CHOSEN = "type_chosen"
    SWING_CHOSEN = "swing_chosen"
    RESULT_CHOSEN = "result_chosen"
    HIT_DETAILS_PARTIAL = "hit_details_partial"
    COMPLETE = "complete"


@dataclass(frozen=True)
class PendingSelection:
    pitch_type: PitchType | None = None
    swung: bool | None = None
    result: SwingResult | None = None
    hit_placement: FieldPosition | None = None
    hit_type: HitType | None = None

    @property
    def state(self) -> SelectionState:
        if is_complete(self):
            return SelectionState.COMPLETE
        if self.hit_placement is not None or self.hit_type is not None:
            return SelectionState.HIT_DETAILS_PARTIAL
        if self.result is not None:
            return SelectionState.RESULT_CHOSEN
        if self.swung is not None:
            return SelectionState.SWING_CHOSEN
        if self.pitch_type is not None:
            return SelectionState.TYPE_CHOSEN
        return SelectionState.EMPTY


EMPTY_SELECTION = PendingSelection()


def is_complete(selection: PendingSelection) -> bool:
    if selection.pitch_type is None or selection.swung is None:
        return False
    if not selection.swung:
        return True
    if selection.result is None:
        return False
    if selection.result is SwingResult.MISS:
        return True
    return selection.hit_placement is not None and selection.hit_type is not None


def choose_type(selection: PendingSelection, pitch_type: PitchType) -> PendingSelection:
    return replace(selection, pitch_type=pitch_type)


def choose_swing(selection: PendingSelection, swung: bool) -> Result[PendingSelection, SelectionOutOfOrder]:
    if selection.pitch_type is None:
        return Err(SelectionOutOfOrder(message="Choose a pitch type before the swing", step="swing"))
    return Ok(PendingSelection(pitch_type=selection.pitch_type, swung=swung))


def choose_result(
    selection: PendingSelection, result: SwingResult
) -> Result[PendingSelection, SelectionOutOfOrder]:
    if selection.swung is not True:
        return Err(SelectionOutOfOrder(message="A result can only follow a swing", step="result"))
    return Ok(PendingSelection(pitch_type=selection.pitch_type, swung=True, result=result))


def choose_hit_placement(
    selection: PendingSelection, placement: FieldPosition
) -> Result[PendingSelection, SelectionOutOfOrder]:
    if selection.result is not SwingResult.HIT:
        return Err(SelectionOutOfOrder(message="Hit placement requires a hit", step="hit_placement"))
    return Ok(replace(selection, hit_placement=placement))


def choose_hit_type(selection: PendingSelection, hit_type: HitType) -> Result[PendingSelection, SelectionOutOfOrder]:
    if selection.result is not SwingResult.HIT:
        return Err(SelectionOutOfOrder(message="Hit type requires a hit", step="hit_type"))
    return Ok(replace(selection, hit_type=hit_type))


def _outcome(selection: PendingSelection) -> PitchOutcome:
    if not selection.swung:
        return NoSwing()
    if selection.result is SwingResult.MISS:
        return Miss()
    assert selection.hit_placement is not None and selection.hit_type is not None
    return Hit(placement=selection.hit_placement, hit_type=selection.hit_type)


def build_record(
    selection: PendingSelection, *, pitch_id: str, timestamp: datetime
) -> Result[PitchRecord, IncompleteSelection]:
    """Freeze a complete selection into a ``PitchRecord``."""
    if not is_complete(selection):
        return Err(
            IncompleteSelection(message=f"Selection is not complete (state: {selection.state})"),
        )
    assert selection.pitch_type is not None
    return Ok(PitchRecord(id=pitch_id, pitch_type=selection.pitch_type, outcome=_outcome(selection), timestamp=timestamp))
