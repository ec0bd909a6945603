from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import pytest

if TYPE_CHECKING:
    from numpy.random import Generator


@pytest.fixture(scope="session")
def rng() -> Generator:
    return np.random.default_rng(seed=0)


@pytest.fixture
def random_points(rng: Generator) -> np.ndarray:
    return rng.random((60, 2))


@pytest.fixture
def planted_collinear_points(random_points: np.ndarray, rng: Generator) -> np.ndarray:
    """Random points together with a third point on the line through two of them."""
    i, j = rng.choice(len(random_points), size=2, replace=False)
    t = rng.uniform(0.1, 0.9)
    extra = (1 - t) * random_points[i] + t * random_points[j]
    return np.insert(random_points, rng.integers(len(random_points)), extra, axis=0)
