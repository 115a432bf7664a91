"""
Point source abstraction and mock implementations.

A point source stands in for the spatial tracking collaborator: it turns a
screen-space tap into a world-space point, or None when the raycast hits
nothing. Live AR integrations should inherit from PointSource; the core only
ever sees the resolved points.
"""

from abc import ABC, abstractmethod
from collections import deque
import logging
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from .models import Point3D

logger = logging.getLogger(__name__)

ScreenPoint = Tuple[float, float]


class PointSource(ABC):
    """
    Abstract base class for world-point sources.

    All sources (scripted, mock or live) should inherit from this class
    and implement pick().
    """

    @abstractmethod
    def pick(self, screen_point: Optional[ScreenPoint] = None) -> Optional[Point3D]:
        """
        Resolve a tap to a world point.

        Args:
            screen_point: Tap location in view coordinates. Sources that do
                not model a camera may ignore it.

        Returns:
            Point3D in meters, or None if nothing was hit.
        """
        pass

    def is_available(self) -> bool:
        """Whether spatial tracking can run on this device."""
        return True

    def close(self) -> None:
        """Clean up resources (stop sessions, release camera, etc.)."""
        pass


class ScriptedPointSource(PointSource):
    """
    Replays a fixed sequence of picks.

    None entries simulate raycast misses. Once the script is exhausted
    every further pick is a miss.
    """

    def __init__(self, points: Iterable[Optional[Point3D]], available: bool = True):
        self._queue: deque = deque(points)
        self._available = available

    @property
    def remaining(self) -> int:
        return len(self._queue)

    def pick(self, screen_point: Optional[ScreenPoint] = None) -> Optional[Point3D]:
        if not self._queue:
            logger.debug("Scripted source exhausted")
            return None
        return self._queue.popleft()

    def is_available(self) -> bool:
        return self._available


class MockPointSource(PointSource):
    """
    Mock raycast for testing and development.

    Alternates between the floor and a furniture surface so that successive
    pairs of picks measure the configured surface heights, with horizontal
    scatter and vertical noise like a hand-held device.
    """

    FLOOR_Y = 0.0  # meters
    SURFACE_HEIGHTS = (0.45, 0.72)  # chair seat, desk top (meters)

    def __init__(
        self,
        floor_y: float = FLOOR_Y,
        surface_heights: Sequence[float] = SURFACE_HEIGHTS,
        noise_m: float = 0.002,  # vertical noise std dev
        scatter_m: float = 0.3,  # horizontal spread of taps
        miss_rate: float = 0.0,  # probability a tap hits nothing
        seed: Optional[int] = None,
    ):
        """
        Initialize mock source.

        Args:
            floor_y: World y of the floor plane
            surface_heights: Surface heights above the floor, cycled in order
            noise_m: Standard deviation of vertical noise
            scatter_m: Half-width of the horizontal tap area
            miss_rate: Fraction of taps that return None
            seed: Seed for reproducible picks
        """
        if not surface_heights:
            raise ValueError("surface_heights must not be empty")
        if not 0.0 <= miss_rate <= 1.0:
            raise ValueError("miss_rate must be between 0 and 1")

        self.floor_y = floor_y
        self.surface_heights = tuple(surface_heights)
        self.noise_m = noise_m
        self.scatter_m = scatter_m
        self.miss_rate = miss_rate
        self._rng = np.random.default_rng(seed)

        # State tracking
        self._on_floor = True
        self._surface_index = 0

    def pick(self, screen_point: Optional[ScreenPoint] = None) -> Optional[Point3D]:
        if self.miss_rate and self._rng.random() < self.miss_rate:
            return None

        if self._on_floor:
            y = self.floor_y
        else:
            y = self.floor_y + self.surface_heights[self._surface_index]
            self._surface_index = (self._surface_index + 1) % len(self.surface_heights)
        self._on_floor = not self._on_floor

        y += self._rng.normal(0.0, self.noise_m) if self.noise_m else 0.0
        x, z = self._rng.uniform(-self.scatter_m, self.scatter_m, 2)

        return Point3D(float(x), float(y), float(z))
