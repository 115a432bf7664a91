"""
Caller-side input validation.

The calculator and the measurement session assume clean finite numbers;
anything typed by a user goes through these helpers first.
"""

import math
from typing import Optional

from .errors import InputValidationError
from .models import Point3D


def parse_centimeters(text, name: str = "value") -> float:
    """
    Parse a positive, finite length in centimeters.

    Raises:
        InputValidationError: If the text is empty, not a number,
            not finite, or not positive.
    """
    if text is None or not str(text).strip():
        raise InputValidationError(f"{name} is required")

    try:
        value = float(str(text).strip().replace(",", "."))
    except ValueError as e:
        raise InputValidationError(f"{name} is not a number: {text!r}") from e

    if not math.isfinite(value):
        raise InputValidationError(f"{name} must be finite")
    if value <= 0:
        raise InputValidationError(f"{name} must be positive")
    return value


def parse_point(text: str) -> Optional[Point3D]:
    """
    Parse "x,y,z" (meters) into a Point3D.

    An empty string means the tap hit nothing and returns None.
    """
    text = text.strip()
    if not text:
        return None

    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 3:
        raise InputValidationError(f"Point must have 3 coordinates: {text!r}")

    try:
        x, y, z = (float(p) for p in parts)
    except ValueError as e:
        raise InputValidationError(f"Point has a non-numeric coordinate: {text!r}") from e

    if not all(math.isfinite(c) for c in (x, y, z)):
        raise InputValidationError(f"Point coordinates must be finite: {text!r}")
    return Point3D(x, y, z)


def parse_points(text: str) -> list:
    """Parse a semicolon-separated list of points; empty entries are misses."""
    return [parse_point(token) for token in text.split(";")]
