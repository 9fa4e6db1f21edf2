"""
Pytest configuration and shared fixtures for generic-dbscan tests.
"""

from dataclasses import dataclass
from typing import List, Tuple

import matplotlib
import numpy as np
import pytest

matplotlib.use("Agg")


# ==============================================================================
# Point types
# ==============================================================================

@dataclass(frozen=True)
class LabeledPoint:
    """2D point with an explicit id; implements the Proximity protocol."""

    id: int
    x: float
    y: float

    def distance(self, other: "LabeledPoint") -> float:
        return float(np.hypot(self.x - other.x, self.y - other.y))


# ==============================================================================
# Sample data
# ==============================================================================

@pytest.fixture
def reference_points() -> List[Tuple[float, float]]:
    """Five 2D points used by the reference scenarios."""
    return [(0.0, 0.0), (1.0, 0.0), (0.0, -1.0), (1.0, 2.0), (3.0, 5.0)]


@pytest.fixture
def bridge_points() -> List[Tuple[float]]:
    """
    Two dense 1D groups sharing one border point at x=0.

    With eps=1 and min_samples=4 the cores are -1 and 1; x=0 has only three
    neighbours and is reachable from both cores.
    """
    return [(-2.0,), (-1.5,), (-1.0,), (0.0,), (1.0,), (1.5,), (2.0,)]


@pytest.fixture
def labeled_points() -> List[LabeledPoint]:
    """Points from the two-group example, with ids."""
    coords = [
        (0.0, 0.0), (1.0, 0.0), (0.0, -1.0), (1.0, 2.0),
        (3.0, 5.0), (4.0, 5.0), (5.0, 5.0),
        (3.0, -2.0), (3.0, 0.0), (-1.0, 4.0),
    ]
    return [LabeledPoint(i, x, y) for i, (x, y) in enumerate(coords)]


@pytest.fixture
def random_points() -> np.ndarray:
    """200 random 2D points, seeded."""
    rng = np.random.default_rng(42)
    return rng.uniform(0, 10, size=(200, 2))


@pytest.fixture
def blob_points() -> np.ndarray:
    """Three well separated blobs plus three far outliers."""
    rng = np.random.default_rng(7)
    centers = np.array([[0.0, 0.0], [10.0, 10.0], [-10.0, 10.0]])
    blobs = [center + rng.normal(scale=0.4, size=(50, 2)) for center in centers]
    outliers = np.array([[30.0, 30.0], [-30.0, -30.0], [30.0, -30.0]])
    return np.vstack(blobs + [outliers])
