# particle.py
"""
Manages the state of the free electrons in the wire.

This module defines the ParticlePool class, which stores per-particle state
in NumPy arrays: the dynamic track position and the static entropy (lateral
lane, idle-vibration phase) drawn once at construction.
"""
import logging
import numpy as np
from typing import Union

from constants import (
    DEFAULT_PARTICLE_COUNT, DEFAULT_SPEED, DEFAULT_LATERAL_OFFSET_MAX,
    PHASE_DELAY_RANGE, PHASE_DURATION_RANGE,
)
from track import TrackGeometry, DEFAULT_TRACK

# --- Data Contracts ---
#
# class ParticlePool:
#   - __init__(self, count, speed, lateral_offset_max, track, rng):
#     - Inputs:
#       - count: int, number of electrons (> 0).
#       - speed: float, track units per second (> 0).
#       - lateral_offset_max: float, half width of the wire (>= 0).
#       - track: TrackGeometry the particles travel along.
#       - rng: seed or numpy Generator, the single entropy source.
#     - Side Effects: Initializes internal NumPy arrays. Raises ValueError
#       on invalid configuration.
#     - Invariants:
#       - self.positions has shape (N,) of dtype float64, values in [0, L).
#       - self.offsets, self.phase_delays, self.phase_durations have
#         shape (N,) and are never written after construction.
#
#   - advance(self, delta_seconds: float) -> None:
#     - Side Effects: positions := (positions + speed * dt) mod L.
#       The caller decides whether movement is enabled.


class ParticlePool:
    """
    A fixed-size pool of electrons following the loop at constant speed.
    """
    def __init__(
        self,
        count: int = DEFAULT_PARTICLE_COUNT,
        speed: float = DEFAULT_SPEED,
        lateral_offset_max: float = DEFAULT_LATERAL_OFFSET_MAX,
        track: TrackGeometry = DEFAULT_TRACK,
        rng: Union[int, None, np.random.Generator] = None,
    ):
        if int(count) != count or count <= 0:
            msg = f"Configuration error: particle_count must be a positive integer, got {count!r}."
            logging.critical(msg)
            raise ValueError(msg)
        if speed <= 0:
            msg = f"Configuration error: speed must be positive, got {speed!r}."
            logging.critical(msg)
            raise ValueError(msg)
        if lateral_offset_max < 0:
            msg = f"Configuration error: lateral_offset_max must be >= 0, got {lateral_offset_max!r}."
            logging.critical(msg)
            raise ValueError(msg)

        self.particle_count = int(count)
        self.speed = float(speed)
        self.track = track

        # All per-particle randomness comes from one generator so a seed
        # reproduces the whole pool.
        if isinstance(rng, np.random.Generator):
            self.rng = rng
        else:
            self.rng = np.random.default_rng(rng)

        self.positions = self.rng.uniform(0.0, track.length, size=self.particle_count)
        self.offsets = self.rng.uniform(
            -lateral_offset_max, lateral_offset_max, size=self.particle_count
        )
        self.phase_delays = self.rng.uniform(*PHASE_DELAY_RANGE, size=self.particle_count)
        self.phase_durations = self.rng.uniform(*PHASE_DURATION_RANGE, size=self.particle_count)

        for static in (self.offsets, self.phase_delays, self.phase_durations):
            static.flags.writeable = False

        logging.info(
            f"ParticlePool initialized with {self.particle_count} particles "
            f"at speed {self.speed} on a loop of length {track.length}."
        )
        logging.debug(
            f"Particle arrays created. Positions shape: {self.positions.shape}, "
            f"offset range: [{-lateral_offset_max}, {lateral_offset_max})"
        )

    def advance(self, delta_seconds: float) -> None:
        """
        Moves every particle forward by speed * delta_seconds along the loop.
        """
        if delta_seconds < 0:
            raise ValueError(f"delta_seconds must be non-negative, got {delta_seconds}")
        if delta_seconds == 0:
            return
        length = self.track.length
        positions = np.mod(self.positions + self.speed * delta_seconds, length)
        # np.mod can round up to exactly `length` for tiny negative inputs.
        positions[positions >= length] = 0.0
        self.positions = positions

    def project(self):
        """Returns (xs, ys, sides) for the current positions."""
        return self.track.project(self.positions, self.offsets)
