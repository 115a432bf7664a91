"""
Data models and types for the ergonomic height system.

Defines the value objects produced by the calculator and the measurement
session, so callers and renderers share one vocabulary.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional

import numpy as np


class StatusTier(Enum):
    """How far a current furniture height is from the recommendation."""
    OPTIMAL = "optimal"
    MINOR = "minor"
    MAJOR = "major"


class Direction(Enum):
    """
    Advice attached to a status tier.

    MINOR deviations advise the move (HIGHER/LOWER); MAJOR deviations
    describe the furniture (TOO_HIGH/TOO_LOW).
    """
    NONE = "none"
    HIGHER = "higher"
    LOWER = "lower"
    TOO_HIGH = "too high"
    TOO_LOW = "too low"


class MeasurementType(Enum):
    """Which piece of furniture is being measured."""
    CHAIR_HEIGHT = "chair"
    DESK_HEIGHT = "desk"


class MeasurementState(Enum):
    NOT_STARTED = "not_started"
    WAITING_FOR_END_POINT = "waiting_for_end_point"
    COMPLETED = "completed"


class AdjustmentTarget(Enum):
    NONE = "none"
    START = "start"
    END = "end"


class PickStatus(Enum):
    """Outcome of the last input handed to a measurement session."""
    ACCEPTED = "accepted"
    NO_TARGET = "no_target"     # tracking returned no intersection
    IGNORED = "ignored"         # input not legal in the current state


@dataclass(frozen=True)
class Point3D:
    """
    World-space point from the spatial tracking collaborator.

    Coordinates in meters; y is the vertical axis.
    """
    x: float
    y: float
    z: float

    @property
    def vector(self) -> np.ndarray:
        """Point as numpy array."""
        return np.array([self.x, self.y, self.z], dtype=float)

    def distance_to(self, other: "Point3D") -> float:
        """Euclidean distance in meters."""
        return float(np.linalg.norm(self.vector - other.vector))

    def vertical_distance_to(self, other: "Point3D") -> float:
        """Absolute y-axis separation in meters."""
        return abs(other.y - self.y)

    def as_tuple(self) -> tuple:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class FurnitureHeights:
    """
    Recommended furniture heights.

    Both values in centimeters, rounded to one decimal place.
    """
    chair_height: float  # cm
    desk_height: float  # cm

    def description(self) -> str:
        return (
            "Recommended heights:\n"
            f"- Chair height: {self.chair_height:.1f} cm\n"
            f"- Desk height: {self.desk_height:.1f} cm"
        )


@dataclass(frozen=True)
class HeightRange:
    """Tolerance band around an optimal height (cm)."""
    minimum: float
    optimal: float
    maximum: float

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum


@dataclass(frozen=True)
class HeightRanges:
    chair: HeightRange
    desk: HeightRange


@dataclass(frozen=True)
class DimensionAnalysis:
    """
    Comparison of one current furniture height against its optimum.

    difference = current - optimal, so a positive difference means the
    furniture is higher than recommended.
    """
    item: str  # "chair" or "desk"
    current_height: float  # cm
    optimal_height: float  # cm
    difference: float  # cm
    tier: StatusTier
    direction: Direction

    @property
    def magnitude(self) -> float:
        """Absolute deviation in centimeters."""
        return abs(self.difference)

    def message(self) -> str:
        """Human-readable status line."""
        if self.tier == StatusTier.OPTIMAL:
            return f"Your {self.item} height is optimal"
        if self.tier == StatusTier.MINOR:
            return (f"Consider adjusting your {self.item} {self.direction.value} "
                    f"by {self.magnitude:.1f} cm")
        return f"Your {self.item} is {self.direction.value} by {self.magnitude:.1f} cm"

    def as_dict(self) -> dict:
        return {
            "item": self.item,
            "current_height": self.current_height,
            "optimal_height": self.optimal_height,
            "difference": self.difference,
            "magnitude": self.magnitude,
            "tier": self.tier.value,
            "direction": self.direction.value,
        }


@dataclass(frozen=True)
class SetupComparison:
    """Chair and desk analyses for one person."""
    chair: DimensionAnalysis
    desk: DimensionAnalysis

    @property
    def is_optimal(self) -> bool:
        return self.chair.tier == StatusTier.OPTIMAL and self.desk.tier == StatusTier.OPTIMAL

    def as_dict(self) -> dict:
        return {"chair": self.chair.as_dict(), "desk": self.desk.as_dict()}


@dataclass(frozen=True)
class MeasurementSnapshot:
    """
    State of a measurement session after one mutating call.

    This is what the rendering layer consumes to place markers, the
    connecting line and the distance label.
    """
    state: MeasurementState
    is_adjusting: bool
    adjusting_target: AdjustmentTarget
    measurement_result_cm: Optional[float]
    start_point: Optional[Point3D]
    end_point: Optional[Point3D]
    status: PickStatus
    measurement_type: MeasurementType
    is_measuring: bool

    @property
    def is_completed(self) -> bool:
        return self.state == MeasurementState.COMPLETED

    def as_dict(self) -> dict:
        data = asdict(self)
        data["state"] = self.state.value
        data["adjusting_target"] = self.adjusting_target.value
        data["status"] = self.status.value
        data["measurement_type"] = self.measurement_type.value
        data["start_point"] = list(self.start_point.as_tuple()) if self.start_point else None
        data["end_point"] = list(self.end_point.as_tuple()) if self.end_point else None
        return data
