"""
Ergonomic Height Calculator
Maps a person's height to recommended chair and desk heights and grades a
current setup against them.

All lengths are centimeters. Inputs are assumed to be finite floats that the
caller has already validated (see heightify.validation); nothing here raises
for out-of-range bodies.
"""

import math

from .config import DEFAULT_CONFIG, HeightifyConfig
from .models import (
    Direction,
    DimensionAnalysis,
    FurnitureHeights,
    HeightRange,
    HeightRanges,
    SetupComparison,
    StatusTier,
)


def round1(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    scaled = math.floor(abs(value) * 10 + 0.5)
    return math.copysign(scaled, value) / 10


def calculate_optimal_heights(person_height: float,
                              config: HeightifyConfig = DEFAULT_CONFIG) -> FurnitureHeights:
    """
    Calculate optimal furniture heights based on a person's height.

    Args:
        person_height: Height of the person in centimeters

    Returns:
        FurnitureHeights with recommended chair and desk heights
    """
    rules = config.ergonomics

    # Calf length (popliteal height proxy)
    calf_length = person_height * rules.calf_ratio

    # Chair sits at calf length plus shoe/comfort allowance
    chair_height = calf_length + rules.chair_offset_cm

    # Seated elbow height above the chair; offset applied before rounding
    desk_height = chair_height + rules.desk_offset_cm

    return FurnitureHeights(
        chair_height=round1(chair_height),
        desk_height=round1(desk_height),
    )


def get_height_ranges(person_height: float,
                      config: HeightifyConfig = DEFAULT_CONFIG) -> HeightRanges:
    """Recommended tolerance bands around the optimal heights."""
    rules = config.ergonomics
    optimal = calculate_optimal_heights(person_height, config)

    return HeightRanges(
        chair=HeightRange(
            minimum=optimal.chair_height - rules.chair_tolerance_cm,
            optimal=optimal.chair_height,
            maximum=optimal.chair_height + rules.chair_tolerance_cm,
        ),
        desk=HeightRange(
            minimum=optimal.desk_height - rules.desk_tolerance_cm,
            optimal=optimal.desk_height,
            maximum=optimal.desk_height + rules.desk_tolerance_cm,
        ),
    )


def classify_difference(difference: float,
                        config: HeightifyConfig = DEFAULT_CONFIG) -> tuple:
    """
    Grade a (current - optimal) difference.

    Thresholds are strict: a difference of exactly the optimal threshold
    is already MINOR, exactly the major threshold is already MAJOR.

    Returns:
        (StatusTier, Direction)
    """
    rules = config.ergonomics
    magnitude = abs(difference)

    if magnitude < rules.optimal_threshold_cm:
        return StatusTier.OPTIMAL, Direction.NONE
    if magnitude < rules.major_threshold_cm:
        # Advise moving the furniture against the sign of the difference
        return StatusTier.MINOR, Direction.LOWER if difference > 0 else Direction.HIGHER
    return StatusTier.MAJOR, Direction.TOO_HIGH if difference > 0 else Direction.TOO_LOW


def _analyze_dimension(item: str, current: float, optimal: float,
                       config: HeightifyConfig) -> DimensionAnalysis:
    difference = current - optimal
    tier, direction = classify_difference(difference, config)
    return DimensionAnalysis(
        item=item,
        current_height=current,
        optimal_height=optimal,
        difference=difference,
        tier=tier,
        direction=direction,
    )


def analyze_current_setup(person_height: float,
                          current_chair_height: float,
                          current_desk_height: float,
                          config: HeightifyConfig = DEFAULT_CONFIG) -> SetupComparison:
    """
    Check current furniture heights against the ergonomic recommendation.

    Args:
        person_height: Height of the person in centimeters
        current_chair_height: Current chair height in centimeters
        current_desk_height: Current desk height in centimeters

    Returns:
        SetupComparison with a tier and direction for chair and desk
    """
    optimal = calculate_optimal_heights(person_height, config)
    return SetupComparison(
        chair=_analyze_dimension("chair", current_chair_height, optimal.chair_height, config),
        desk=_analyze_dimension("desk", current_desk_height, optimal.desk_height, config),
    )


# ---------------------------------------------------------------------
# TEXT REPORTS
# ---------------------------------------------------------------------

def format_recommendation(heights: FurnitureHeights) -> str:
    return heights.description()


def format_ranges(ranges: HeightRanges) -> str:
    chair, desk = ranges.chair, ranges.desk
    return (
        "Recommended height ranges:\n"
        "\n"
        "Chair height:\n"
        f"- Minimum: {chair.minimum:.1f} cm\n"
        f"- Optimal: {chair.optimal:.1f} cm\n"
        f"- Maximum: {chair.maximum:.1f} cm\n"
        "\n"
        "Desk height:\n"
        f"- Minimum: {desk.minimum:.1f} cm\n"
        f"- Optimal: {desk.optimal:.1f} cm\n"
        f"- Maximum: {desk.maximum:.1f} cm\n"
        "\n"
        "Note: These are recommendations based on ergonomic standards.\n"
        "Adjust within the ranges for personal comfort."
    )


def format_analysis(comparison: SetupComparison) -> str:
    chair, desk = comparison.chair, comparison.desk
    return (
        "Current Setup Analysis:\n"
        "\n"
        "Chair Height:\n"
        f"- Current: {chair.current_height:.1f} cm\n"
        f"- Optimal: {chair.optimal_height:.1f} cm\n"
        f"{chair.message()}\n"
        "\n"
        "Desk Height:\n"
        f"- Current: {desk.current_height:.1f} cm\n"
        f"- Optimal: {desk.optimal_height:.1f} cm\n"
        f"{desk.message()}"
    )
