from __future__ import annotations

import pytest

from heightify.models import Point3D
from heightify.measurement import MeasurementSession


@pytest.fixture
def floor() -> Point3D:
    return Point3D(0.0, 0.0, 0.0)


@pytest.fixture
def seat() -> Point3D:
    return Point3D(0.0, 0.38, 0.0)


@pytest.fixture
def completed_session(floor: Point3D, seat: Point3D) -> MeasurementSession:
    """Session with a finished 38 cm measurement."""
    session = MeasurementSession()
    session.start()
    session.pick(floor)
    session.pick(seat)
    return session
