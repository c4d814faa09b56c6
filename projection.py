# projection.py
"""
Derives the drawable frame from the current engine state.

Everything here is read-only: the functions take the particle pool, the
battery, the spawn pool and a timestamp and return a FrameSnapshot that an
external renderer can draw without knowing anything about the engine.
"""
import functools
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from battery import Battery, BatteryState
from constants import (
    ION_GRID_COLUMNS, ION_GRID_ROWS, ION_GRID_ORIGIN, ION_GRID_SPACING,
    DEFAULT_FIELD_LINE_STEP, DEFAULT_VIBRATION_AMPLITUDE,
)
from particle import ParticlePool
from spawn import SpawnPool
from track import (
    TrackGeometry, DEFAULT_TRACK,
    in_battery_occlusion, in_switch_occlusion, in_field_exclusion,
)

# --- Data Contracts ---
#
# project_frame(particles, battery, spawn_pool, now_ms, ...) -> FrameSnapshot
#   - Inputs: the live engine components and the frame timestamp (ms).
#   - Outputs: a FrameSnapshot; arrays in it are fresh copies.
#   - Side Effects: None. Does not mutate any input.
#
# field_line_samples(step, track) -> Tuple[FieldMarker, ...]
#   - Samples every `step` units of arc length over [0, L), skipping the
#     top rail under the battery. Raises ValueError for step <= 0.


@dataclass(frozen=True)
class FieldMarker:
    x: float
    y: float
    orientation: str  # "vertical" on top/bottom, "horizontal" on left/right


@dataclass(frozen=True)
class SpawnPoint:
    id: int
    x: float
    y: float
    opacity: float
    progress: float


@dataclass(frozen=True)
class FrameSnapshot:
    timestamp: float
    state: BatteryState
    particle_xs: np.ndarray
    particle_ys: np.ndarray
    field_markers: Tuple[FieldMarker, ...]
    spawn_points: Tuple[SpawnPoint, ...]
    electrolyte_level: float
    ion_count: int
    ion_glyphs: Tuple[Tuple[float, float], ...]
    switch_closed: bool

    @property
    def bulb_lit(self) -> bool:
        return self.state is BatteryState.CLOSED_ACTIVE

    @property
    def visible_particle_count(self) -> int:
        return int(self.particle_xs.shape[0])


@functools.lru_cache(maxsize=8)
def field_line_samples(step: float = DEFAULT_FIELD_LINE_STEP,
                       track: TrackGeometry = DEFAULT_TRACK) -> Tuple[FieldMarker, ...]:
    if step <= 0:
        raise ValueError(f"field line step must be positive, got {step}")
    markers = []
    for k in range(math.ceil(track.length / step)):
        point = track.locate(k * step, 0.0)
        if in_field_exclusion(point.x, point.side):
            continue
        vertical = point.side in ("top", "bottom")
        markers.append(FieldMarker(point.x, point.y, "vertical" if vertical else "horizontal"))
    return tuple(markers)


def ion_glyph_layout(count: int) -> Tuple[Tuple[float, float], ...]:
    """Row-major cells of the ion grid, one per remaining ion."""
    cells = min(max(int(count), 0), ION_GRID_COLUMNS * ION_GRID_ROWS)
    ox, oy = ION_GRID_ORIGIN
    return tuple(
        (ox + (i % ION_GRID_COLUMNS) * ION_GRID_SPACING, oy + (i // ION_GRID_COLUMNS) * ION_GRID_SPACING)
        for i in range(cells)
    )


def visible_particles(particles: ParticlePool, battery: Battery, now_ms: float,
                      vibration_amplitude: float = DEFAULT_VIBRATION_AMPLITUDE):
    """
    Projects the pool, drops occluded particles and, when the current is not
    flowing, adds the idle vibration around each resting point.
    """
    xs, ys, _ = particles.project()

    # Culling tests the resting point, not the vibrated one.
    hidden = in_battery_occlusion(xs, ys)
    if not battery.circuit_closed:
        hidden = hidden | in_switch_occlusion(xs, ys)
    keep = ~hidden

    if battery.state is not BatteryState.CLOSED_ACTIVE and vibration_amplitude > 0:
        t = now_ms / 1000.0
        phase = 2.0 * np.pi * (t - particles.phase_delays) / particles.phase_durations
        xs = xs + vibration_amplitude * np.sin(phase)
        ys = ys + vibration_amplitude * np.cos(phase)

    return xs[keep], ys[keep]


def project_frame(
    particles: ParticlePool,
    battery: Battery,
    spawn_pool: SpawnPool,
    now_ms: float,
    field_step: float = DEFAULT_FIELD_LINE_STEP,
    vibration_amplitude: float = DEFAULT_VIBRATION_AMPLITUDE,
) -> FrameSnapshot:
    state = battery.state
    xs, ys = visible_particles(particles, battery, now_ms, vibration_amplitude)

    if state is BatteryState.CLOSED_ACTIVE:
        markers = field_line_samples(field_step, particles.track)
    else:
        markers = ()

    spawn_points = []
    for entry in spawn_pool.entries(now_ms):
        x, y = spawn_pool.position(entry, now_ms)
        spawn_points.append(SpawnPoint(
            id=entry.id, x=x, y=y,
            opacity=spawn_pool.opacity(entry, now_ms),
            progress=spawn_pool.progress(entry, now_ms),
        ))

    return FrameSnapshot(
        timestamp=now_ms,
        state=state,
        particle_xs=xs,
        particle_ys=ys,
        field_markers=markers,
        spawn_points=tuple(spawn_points),
        electrolyte_level=battery.electrolyte_level,
        ion_count=battery.ion_count,
        ion_glyphs=ion_glyph_layout(battery.ion_count),
        switch_closed=battery.circuit_closed,
    )
