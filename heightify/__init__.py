"""Ergonomic furniture heights and two-point height measurement."""

from .calculator import (
    analyze_current_setup,
    calculate_optimal_heights,
    classify_difference,
    get_height_ranges,
    round1,
)
from .config import DEFAULT_CONFIG, HeightifyConfig, load_config
from .controller import CurrentSetup, MeasurementController
from .measurement import MeasurementSession
from .models import (
    AdjustmentTarget,
    Direction,
    DimensionAnalysis,
    FurnitureHeights,
    HeightRange,
    HeightRanges,
    MeasurementSnapshot,
    MeasurementState,
    MeasurementType,
    PickStatus,
    Point3D,
    SetupComparison,
    StatusTier,
)
from .source import MockPointSource, PointSource, ScriptedPointSource

__all__ = [
    "analyze_current_setup",
    "calculate_optimal_heights",
    "classify_difference",
    "get_height_ranges",
    "round1",
    "DEFAULT_CONFIG",
    "HeightifyConfig",
    "load_config",
    "CurrentSetup",
    "MeasurementController",
    "MeasurementSession",
    "AdjustmentTarget",
    "Direction",
    "DimensionAnalysis",
    "FurnitureHeights",
    "HeightRange",
    "HeightRanges",
    "MeasurementSnapshot",
    "MeasurementState",
    "MeasurementType",
    "PickStatus",
    "Point3D",
    "SetupComparison",
    "StatusTier",
    "MockPointSource",
    "PointSource",
    "ScriptedPointSource",
]
