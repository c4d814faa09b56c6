# track.py
"""
Parameterization of the closed conducting loop.

A single scalar "track position" in [0, L) is mapped onto the rectangular
rail, starting at top-center and running clockwise (on screen, y down):
top (right half), right side downwards, bottom leftwards, left side upwards,
and top (left half) back to the start. A lateral offset shifts the point
perpendicular to the rail, always outward from the loop interior.

The occlusion and exclusion predicates used by the projection live here too,
so layout and logic read the same geometry constants.
"""
import logging
import math
from typing import NamedTuple, Tuple

import numpy as np
from numba import jit

from constants import (
    RAIL_LEFT, RAIL_TOP, RAIL_RIGHT, RAIL_BOTTOM,
    SIDE_TOP, SIDE_RIGHT, SIDE_BOTTOM, SIDE_LEFT, SIDE_NAMES,
    BATTERY_RECT, SWITCH_RECT, FIELD_EXCLUSION_X,
)

# --- Data Contracts ---
#
# class TrackGeometry:
#   - __init__(self, left, top, right, bottom):
#     - Inputs: the rail rectangle in screen units.
#     - Side Effects: None. Raises ValueError if any segment length is
#       not positive.
#     - Invariants: length == 2 * (width + height); the rectangle is
#       never mutated after construction.
#
#   - locate(self, position: float, offset: float) -> TrackPoint
#     - Pure. Periodic in `length`. Continuous at all four corners for
#       any fixed offset.
#
#   - project(self, positions: ndarray, offsets: ndarray)
#       -> (xs, ys, sides)
#     - Vectorized locate over whole particle arrays. sides holds the
#       integer SIDE_* codes.


class TrackPoint(NamedTuple):
    x: float
    y: float
    side: str


@jit(nopython=True)
def _wrap_scalar(position, length):
    """Floored modulo into [0, length), robust to rounding at the edges."""
    p = position - math.floor(position / length) * length
    if p < 0.0:
        p += length
    if p >= length:
        p -= length
    if p < 0.0:
        p = 0.0
    return p


@jit(nopython=True)
def _locate_numba(position, offset, left, top, right, bottom):
    """
    Numba-jitted core of the parameterization.

    Each segment is walked corner-to-corner on the rail rectangle inflated
    by `offset`, so the along-segment coordinate scales by
    (segment + 2 * offset) / segment. With offset == 0 this is the rail itself.
    """
    width = right - left
    height = bottom - top
    half = width / 2.0
    length = 2.0 * (width + height)
    center_x = left + half

    s = _wrap_scalar(position, length)
    o = offset

    if s < half:
        # top, right half: center -> top-right corner
        x = center_x + s * (half + o) / half
        return x, top - o, SIDE_TOP
    s -= half
    if s < height:
        y = (top - o) + s * (height + 2.0 * o) / height
        return right + o, y, SIDE_RIGHT
    s -= height
    if s < width:
        x = (right + o) - s * (width + 2.0 * o) / width
        return x, bottom + o, SIDE_BOTTOM
    s -= width
    if s < height:
        y = (bottom + o) - s * (height + 2.0 * o) / height
        return left - o, y, SIDE_LEFT
    s -= height
    # top, left half: top-left corner -> center
    x = (left - o) + s * (half + o) / half
    return x, top - o, SIDE_TOP


@jit(nopython=True)
def _project_numba(positions, offsets, left, top, right, bottom):
    """Numba-jitted projection of a whole particle pool."""
    count = positions.shape[0]
    xs = np.empty(count, dtype=np.float64)
    ys = np.empty(count, dtype=np.float64)
    sides = np.empty(count, dtype=np.int32)
    for i in range(count):
        x, y, side = _locate_numba(positions[i], offsets[i], left, top, right, bottom)
        xs[i] = x
        ys[i] = y
        sides[i] = side
    return xs, ys, sides


class TrackGeometry:
    """
    The fixed rectangular loop the electrons travel along.
    """
    def __init__(self, left: float = RAIL_LEFT, top: float = RAIL_TOP,
                 right: float = RAIL_RIGHT, bottom: float = RAIL_BOTTOM):
        self.left = float(left)
        self.top = float(top)
        self.right = float(right)
        self.bottom = float(bottom)

        width = self.right - self.left
        height = self.bottom - self.top
        if width <= 0 or height <= 0:
            msg = (
                f"Configuration error: rail rectangle ({left}, {top}, {right}, {bottom}) "
                f"gives non-positive segment lengths (width={width}, height={height})."
            )
            logging.critical(msg)
            raise ValueError(msg)

        # Traversal order starting at top-center.
        self.segments: Tuple[float, ...] = (width / 2.0, height, width, height, width / 2.0)
        self.length = 2.0 * (width + height)
        logging.debug(f"Track geometry: segments={self.segments}, length={self.length}")

    def wrap(self, position: float) -> float:
        return _wrap_scalar(float(position), self.length)

    def locate(self, position: float, offset: float = 0.0) -> TrackPoint:
        x, y, side = _locate_numba(
            float(position), float(offset),
            self.left, self.top, self.right, self.bottom
        )
        return TrackPoint(x, y, SIDE_NAMES[side])

    def project(self, positions: np.ndarray, offsets: np.ndarray):
        return _project_numba(
            np.ascontiguousarray(positions, dtype=np.float64),
            np.ascontiguousarray(offsets, dtype=np.float64),
            self.left, self.top, self.right, self.bottom
        )


DEFAULT_TRACK = TrackGeometry()


def locate(position: float, offset: float = 0.0) -> TrackPoint:
    """Maps a track position and lateral offset onto the default loop."""
    return DEFAULT_TRACK.locate(position, offset)


# --- Occlusion / exclusion predicates ---
# These accept plain floats or NumPy arrays alike.

def in_rect(x, y, rect):
    x0, y0, x1, y1 = rect
    return (x >= x0) & (x <= x1) & (y >= y0) & (y <= y1)


def in_battery_occlusion(x, y):
    return in_rect(x, y, BATTERY_RECT)


def in_switch_occlusion(x, y):
    return in_rect(x, y, SWITCH_RECT)


def in_field_exclusion(x, side):
    """True for points on the top rail under the battery."""
    if isinstance(side, str):
        side = SIDE_NAMES.index(side)
    x0, x1 = FIELD_EXCLUSION_X
    return (side == SIDE_TOP) & (x >= x0) & (x <= x1)
