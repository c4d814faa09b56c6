import numpy as np
import pytest

from constants import TRACK_LENGTH


def _circular_distance(a, b, length=TRACK_LENGTH):
    d = np.abs(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)) % length
    return np.minimum(d, length - d)


@pytest.fixture
def circular_distance():
    """Distance between track positions, treating L and 0 as the same point."""
    return _circular_distance


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
