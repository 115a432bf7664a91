"""
Point-Pair Measurement State Machine

Reduces two picked world points to a furniture height and lets either
endpoint be re-picked after the measurement is complete.

NOT_STARTED → WAITING_FOR_END_POINT → COMPLETED (⇄ adjusting)

Only the vertical component of the two points is used: horizontal tap
error must not change a height reading.

Every mutating call returns a MeasurementSnapshot. Out-of-order calls are
no-ops reported as PickStatus.IGNORED, and a missing point (no raycast hit)
is reported as PickStatus.NO_TARGET without advancing the state.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from typing import Optional

from .config import DEFAULT_CONFIG, HeightifyConfig
from .models import (
    AdjustmentTarget,
    MeasurementSnapshot,
    MeasurementState,
    MeasurementType,
    PickStatus,
    Point3D,
)

logger = logging.getLogger(__name__)

NO_TARGET_MESSAGE = "No target found"


class MeasurementSession:
    """
    Two-point height measurement with post-completion adjustment.

    Owned by a single controller; not safe for concurrent writers.
    """

    def __init__(self,
                 measurement_type: MeasurementType = MeasurementType.CHAIR_HEIGHT,
                 config: HeightifyConfig = DEFAULT_CONFIG):
        self.config = config
        self.measurement_type = measurement_type
        self.is_measuring = False

        self.state = MeasurementState.NOT_STARTED
        self.start_point: Optional[Point3D] = None
        self.end_point: Optional[Point3D] = None
        self.measurement_result: Optional[float] = None  # cm

        self.is_adjusting = False
        self.adjusting_target = AdjustmentTarget.NONE

        self.last_status = PickStatus.ACCEPTED
        self.last_error: Optional[str] = None

        self.history = deque(maxlen=config.measurement.history_size)

    # -----------------------------------------------------------------
    # LIFECYCLE
    # -----------------------------------------------------------------

    def start(self, measurement_type: Optional[MeasurementType] = None) -> MeasurementSnapshot:
        """Begin a fresh measurement, optionally switching what is measured."""
        if measurement_type is not None:
            self.measurement_type = measurement_type
        self._clear()
        self.is_measuring = True
        self._record("start", self.measurement_type.value)
        return self._snapshot(PickStatus.ACCEPTED)

    def stop(self) -> MeasurementSnapshot:
        """Tear down the session."""
        self._clear()
        self.is_measuring = False
        self._record("stop", "")
        return self._snapshot(PickStatus.ACCEPTED)

    def reset(self) -> MeasurementSnapshot:
        """Clear both points and the result. Legal from any state."""
        self._clear()
        self._record("reset", "")
        return self._snapshot(PickStatus.ACCEPTED)

    # -----------------------------------------------------------------
    # POINT PICKS
    # -----------------------------------------------------------------

    def pick(self, point: Optional[Point3D]) -> MeasurementSnapshot:
        """
        Feed one resolved tap into the session.

        Args:
            point: World point from the tracking collaborator, or None when
                the raycast found no surface.
        """
        if point is None:
            return self._miss()

        if self.state == MeasurementState.NOT_STARTED:
            self.start_point = point
            self._transition(MeasurementState.WAITING_FOR_END_POINT, "Start point placed")

        elif self.state == MeasurementState.WAITING_FOR_END_POINT:
            self.end_point = point
            self._recompute()
            self._transition(MeasurementState.COMPLETED, "End point placed")

        else:
            return self._snapshot(PickStatus.IGNORED)

        self.last_error = None
        return self._snapshot(PickStatus.ACCEPTED)

    # -----------------------------------------------------------------
    # ADJUSTMENT MODE
    # -----------------------------------------------------------------

    def toggle_adjustment(self) -> MeasurementSnapshot:
        """Enter or leave adjustment mode. Only legal once completed."""
        if self.state != MeasurementState.COMPLETED:
            return self._snapshot(PickStatus.IGNORED)

        self.is_adjusting = not self.is_adjusting
        self.adjusting_target = AdjustmentTarget.NONE
        self._record("adjustment", "on" if self.is_adjusting else "off")
        return self._snapshot(PickStatus.ACCEPTED)

    def select_marker(self, point: Optional[Point3D]) -> MeasurementSnapshot:
        """
        Handle a tap while adjusting.

        A tap near a marker selects it; the next tap elsewhere moves the
        selected marker there. A tap that hits nothing with no marker
        selected leaves adjustment mode.
        """
        if self.state != MeasurementState.COMPLETED or not self.is_adjusting:
            return self._snapshot(PickStatus.IGNORED)

        if point is None:
            return self._miss()

        threshold = self.config.measurement.marker_proximity_m

        if point.distance_to(self.start_point) <= threshold:
            self.adjusting_target = AdjustmentTarget.START
            self._record("select", AdjustmentTarget.START.value)

        elif point.distance_to(self.end_point) <= threshold:
            self.adjusting_target = AdjustmentTarget.END
            self._record("select", AdjustmentTarget.END.value)

        elif self.adjusting_target == AdjustmentTarget.START:
            self.start_point = point
            self._recompute()
            self.adjusting_target = AdjustmentTarget.NONE
            self._record("move", AdjustmentTarget.START.value)

        elif self.adjusting_target == AdjustmentTarget.END:
            self.end_point = point
            self._recompute()
            self.adjusting_target = AdjustmentTarget.NONE
            self._record("move", AdjustmentTarget.END.value)

        else:
            self.is_adjusting = False
            self._record("adjustment", "off")

        self.last_error = None
        return self._snapshot(PickStatus.ACCEPTED)

    # -----------------------------------------------------------------
    # STATUS
    # -----------------------------------------------------------------

    def snapshot(self) -> MeasurementSnapshot:
        """Current state without mutating anything."""
        return self._snapshot(self.last_status)

    def get_status(self) -> dict:
        return self.snapshot().as_dict()

    # -----------------------------------------------------------------
    # INTERNALS
    # -----------------------------------------------------------------

    def _recompute(self) -> None:
        if self.start_point is None or self.end_point is None:
            self.measurement_result = None
            return
        meters = self.start_point.vertical_distance_to(self.end_point)
        self.measurement_result = meters * self.config.measurement.meters_to_cm

    def _miss(self) -> MeasurementSnapshot:
        self.last_error = NO_TARGET_MESSAGE
        logger.info("Pick missed in state %s", self.state.value)
        return self._snapshot(PickStatus.NO_TARGET)

    def _clear(self) -> None:
        self.start_point = None
        self.end_point = None
        self.measurement_result = None
        self.is_adjusting = False
        self.adjusting_target = AdjustmentTarget.NONE
        self.last_error = None
        self.state = MeasurementState.NOT_STARTED

    def _transition(self, new_state: MeasurementState, reason: str) -> None:
        if new_state == self.state:
            return

        self.history.append({
            "time": time.time(),
            "from": self.state.value,
            "to": new_state.value,
            "reason": reason
        })
        logger.debug("%s -> %s (%s)", self.state.value, new_state.value, reason)
        self.state = new_state

    def _record(self, action: str, detail: str) -> None:
        self.history.append({
            "time": time.time(),
            "action": action,
            "detail": detail,
            "state": self.state.value
        })

    def _snapshot(self, status: PickStatus) -> MeasurementSnapshot:
        self.last_status = status
        return MeasurementSnapshot(
            state=self.state,
            is_adjusting=self.is_adjusting,
            adjusting_target=self.adjusting_target,
            measurement_result_cm=self.measurement_result,
            start_point=self.start_point,
            end_point=self.end_point,
            status=status,
            measurement_type=self.measurement_type,
            is_measuring=self.is_measuring,
        )
