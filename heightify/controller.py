"""
Measurement controller.

Coordinates the pieces a UI needs for the AR measurement flow:
- World-point acquisition through a PointSource
- The two-point MeasurementSession
- Event logging
- Handing a finished measurement back to the setup form

Provides a simple interface that a view layer drives with taps and button
presses, and that pushes snapshots out through callbacks.
"""

from dataclasses import dataclass
import logging
from typing import Callable, Optional

from .calculator import analyze_current_setup, round1
from .config import DEFAULT_CONFIG, HeightifyConfig
from .errors import MeasurementIncompleteError, TrackingUnavailableError
from .event_logger import EventLogger, EventType
from .measurement import MeasurementSession
from .models import (
    MeasurementSnapshot,
    MeasurementState,
    MeasurementType,
    PickStatus,
    SetupComparison,
)
from .source import PointSource, ScreenPoint

logger = logging.getLogger(__name__)


@dataclass
class CurrentSetup:
    """
    Values collected by the setup form (cm).

    Any of them may still be missing while the user fills the form in.
    """
    person_height: Optional[float] = None
    chair_height: Optional[float] = None
    desk_height: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return None not in (self.person_height, self.chair_height, self.desk_height)

    def analyze(self, config: HeightifyConfig = DEFAULT_CONFIG) -> Optional[SetupComparison]:
        """Compare against the recommendation once every value is present."""
        if not self.is_complete:
            return None
        return analyze_current_setup(self.person_height, self.chair_height,
                                     self.desk_height, config)


class MeasurementController:
    """
    Drives a MeasurementSession from UI events.

    Callbacks:
        on_snapshot: called with every MeasurementSnapshot after a change
        on_error: called with a message when a tap finds no target
    """

    def __init__(
        self,
        source: PointSource,
        config: HeightifyConfig = DEFAULT_CONFIG,
        event_logger: Optional[EventLogger] = None,
    ):
        """
        Initialize controller.

        Args:
            source: Spatial tracking collaborator
            config: Ergonomic and measurement settings
            event_logger: Journal for session events (None to disable)
        """
        self.source = source
        self.config = config
        self.session = MeasurementSession(config=config)
        self.event_logger = event_logger

        # Callbacks for external integration
        self.on_snapshot: Optional[Callable[[MeasurementSnapshot], None]] = None
        self.on_error: Optional[Callable[[str], None]] = None

    @property
    def is_measuring(self) -> bool:
        return self.session.is_measuring

    def start_measurement(self, measurement_type: MeasurementType) -> MeasurementSnapshot:
        """
        Begin measuring a chair or desk.

        Raises:
            TrackingUnavailableError: If the source cannot track on this device.
        """
        if not self.source.is_available():
            raise TrackingUnavailableError("Spatial tracking is not available on this device")

        snapshot = self.session.start(measurement_type)
        logger.info("Measurement started: %s", measurement_type.value)
        self._log(EventType.MEASUREMENT_STARTED, snapshot)
        return self._publish(snapshot)

    def handle_tap(self, screen_point: Optional[ScreenPoint] = None) -> MeasurementSnapshot:
        """Resolve a tap through the source and feed it to the session."""
        if not self.session.is_measuring:
            return self.session.snapshot()

        point = self.source.pick(screen_point)

        if self.session.is_adjusting:
            before = (self.session.start_point, self.session.end_point)
            snapshot = self.session.select_marker(point)
            if (snapshot.start_point, snapshot.end_point) != before:
                logger.info("Marker moved, result now %.1f cm", snapshot.measurement_result_cm)
                self._log(EventType.MARKER_ADJUSTED, snapshot)
        else:
            snapshot = self.session.pick(point)
            if snapshot.status == PickStatus.ACCEPTED:
                if snapshot.state == MeasurementState.COMPLETED:
                    logger.info("Measurement completed: %.1f cm", snapshot.measurement_result_cm)
                    self._log(EventType.MEASUREMENT_COMPLETED, snapshot)
                else:
                    self._log(EventType.POINT_PLACED, snapshot)

        if snapshot.status == PickStatus.NO_TARGET:
            self._log(EventType.POINT_MISSED, snapshot)
            if self.on_error:
                self.on_error(self.session.last_error)

        return self._publish(snapshot)

    def toggle_adjustment(self) -> MeasurementSnapshot:
        return self._publish(self.session.toggle_adjustment())

    def measure_again(self) -> MeasurementSnapshot:
        """Discard the current points and start over with the same type."""
        snapshot = self.session.reset()
        self._log(EventType.MEASUREMENT_RESET, snapshot)
        return self._publish(snapshot)

    def stop_measurement(self) -> MeasurementSnapshot:
        snapshot = self.session.stop()
        self.source.close()
        logger.info("Measurement stopped")
        return self._publish(snapshot)

    def use_measurement(self, setup: CurrentSetup) -> CurrentSetup:
        """
        Copy the finished result into the setup form.

        The measurement type decides whether the chair or the desk field
        is filled. The value is rounded to one decimal like the form shows it.

        Raises:
            MeasurementIncompleteError: If there is no result yet.
        """
        result = self.session.measurement_result
        if result is None:
            raise MeasurementIncompleteError("No completed measurement to use")

        value = round1(result)
        if self.session.measurement_type == MeasurementType.CHAIR_HEIGHT:
            setup.chair_height = value
        else:
            setup.desk_height = value

        self._log(EventType.MEASUREMENT_APPLIED, self.session.snapshot())
        return setup

    def analyze(self, setup: CurrentSetup) -> Optional[SetupComparison]:
        """Analyze the form values and journal the outcome."""
        comparison = setup.analyze(self.config)
        if comparison is not None and self.event_logger:
            self.event_logger.log_analysis(comparison, setup.person_height)
        return comparison

    def _log(self, event_type: EventType, snapshot: MeasurementSnapshot) -> None:
        if self.event_logger:
            self.event_logger.log_snapshot(event_type, snapshot)

    def _publish(self, snapshot: MeasurementSnapshot) -> MeasurementSnapshot:
        if self.on_snapshot:
            self.on_snapshot(snapshot)
        return snapshot
