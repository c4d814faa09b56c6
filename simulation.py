# simulation.py
"""
Drives the time evolution of the circuit.

This module defines the Simulation class, which owns the particle pool, the
battery and the spawn pool, and advances them to a given timestamp. Time is
always supplied by the caller in milliseconds; nothing here reads a clock.

Three time sources are coordinated:
1. a continuous integrator that moves the electrons every frame,
2. a fixed-interval depletion timer for the battery,
3. a fixed-interval spawn timer for the battery-internal electrons, each of
   which expires on its own a fixed lifetime after birth.
The two interval timers only run while the circuit is closed and the battery
is not exhausted.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from battery import Battery, BatteryState
from constants import (
    DEFAULT_PARTICLE_COUNT, DEFAULT_SPEED, DEFAULT_LATERAL_OFFSET_MAX,
    DEFAULT_DEPLETION_INTERVAL_MS, DEFAULT_SPAWN_INTERVAL_MS, DEFAULT_SPAWN_LIFETIME_MS,
    DEFAULT_ELECTROLYTE_LEVEL, DEFAULT_ION_COUNT, DEFAULT_DEPLETION_STEP,
    DEFAULT_FIELD_LINE_STEP, DEFAULT_VIBRATION_AMPLITUDE,
)
from particle import ParticlePool
from projection import FrameSnapshot, project_frame
from spawn import SpawnPool

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, params: Dict[str, Any]):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "seed": int | None
#         - "particle_count": int
#         - "speed": float
#         - "lateral_offset_max": float
#         - "depletion_interval_ms", "spawn_interval_ms",
#           "spawn_lifetime_ms": float
#         - "electrolyte_initial", "ion_initial", "depletion_step": number
#         - "field_line_step", "vibration_amplitude": float
#     - Side Effects: Builds the engine components. Raises ValueError on
#       invalid configuration, before the first frame.
#
#   - start(self, now_ms) -> None: idempotent.
#
#   - update(self, now_ms) -> None:
#     - Side Effects: Fires every interval event due up to now_ms in
#       chronological order, integrating particle motion piecewise between
#       events, then purges expired spawn entries.
#     - Invariants: Particle positions only change while CLOSED_ACTIVE.
#       Interval timers run if and only if the battery is CLOSED_ACTIVE.
#
#   - toggle(self, now_ms), reset(self, now_ms), press(self, now_ms)
#       -> BatteryState: catch up to now_ms, transition, re-sync timers.
#
#   - snapshot(self, now_ms) -> FrameSnapshot


class IntervalTimer:
    """
    A fixed-period timer polled by the driver with injected time.

    Starting a running timer does nothing. Stopping forgets the schedule, so
    the next start begins a fresh period from the start time.
    """
    def __init__(self, name: str, period_ms: float, callback: Callable[[float], None]):
        if period_ms <= 0:
            msg = f"Configuration error: {name} interval must be positive, got {period_ms!r}."
            logging.critical(msg)
            raise ValueError(msg)
        self.name = name
        self.period_ms = float(period_ms)
        self.callback = callback
        self.next_due: Optional[float] = None
        self.activations = 0
        self.fired = 0

    @property
    def running(self) -> bool:
        return self.next_due is not None

    def start(self, now_ms: float) -> None:
        if self.running:
            return
        self.next_due = float(now_ms) + self.period_ms
        self.activations += 1
        logging.debug(f"Timer '{self.name}' started (activation {self.activations}), first due at {self.next_due}.")

    def stop(self) -> None:
        if self.running:
            logging.debug(f"Timer '{self.name}' stopped.")
        self.next_due = None

    def is_due(self, now_ms: float) -> bool:
        return self.running and self.next_due <= now_ms

    def fire(self) -> None:
        # Reschedule before the callback so the callback may stop the timer.
        due = self.next_due
        self.next_due = due + self.period_ms
        self.fired += 1
        self.callback(due)


class Simulation:
    """
    Owns all mutable engine state and advances it to caller-supplied times.
    """
    def __init__(self, params: Optional[Dict[str, Any]] = None,
                 particles: Optional[ParticlePool] = None):
        params = params or {}

        seed = params.get('seed')
        particle_seed, spawn_seed = np.random.SeedSequence(seed).spawn(2)

        self.particles = particles if particles is not None else ParticlePool(
            count=params.get('particle_count', DEFAULT_PARTICLE_COUNT),
            speed=params.get('speed', DEFAULT_SPEED),
            lateral_offset_max=params.get('lateral_offset_max', DEFAULT_LATERAL_OFFSET_MAX),
            rng=np.random.default_rng(particle_seed),
        )
        self.battery = Battery(
            electrolyte_initial=params.get('electrolyte_initial', DEFAULT_ELECTROLYTE_LEVEL),
            ion_initial=params.get('ion_initial', DEFAULT_ION_COUNT),
            depletion_step=params.get('depletion_step', DEFAULT_DEPLETION_STEP),
        )
        self.spawn_pool = SpawnPool(
            lifetime_ms=params.get('spawn_lifetime_ms', DEFAULT_SPAWN_LIFETIME_MS),
            rng=np.random.default_rng(spawn_seed),
        )

        self.field_line_step = float(params.get('field_line_step', DEFAULT_FIELD_LINE_STEP))
        if self.field_line_step <= 0:
            msg = f"Configuration error: field_line_step must be positive, got {self.field_line_step}."
            logging.critical(msg)
            raise ValueError(msg)
        self.vibration_amplitude = float(params.get('vibration_amplitude', DEFAULT_VIBRATION_AMPLITUDE))

        # Timer order is the tie-break order when both are due at once.
        self.depletion_timer = IntervalTimer(
            "depletion", params.get('depletion_interval_ms', DEFAULT_DEPLETION_INTERVAL_MS),
            self._on_depletion_tick,
        )
        self.spawn_timer = IntervalTimer(
            "spawn", params.get('spawn_interval_ms', DEFAULT_SPAWN_INTERVAL_MS),
            self._on_spawn_tick,
        )
        self.timers: List[IntervalTimer] = [self.depletion_timer, self.spawn_timer]

        self.clock: Optional[float] = None
        self.frame_count = 0

        logging.info("Simulation initialized and configuration validated.")

    # --- Lifecycle ---

    @property
    def started(self) -> bool:
        return self.clock is not None

    @property
    def state(self) -> BatteryState:
        return self.battery.state

    def start(self, now_ms: float) -> None:
        if self.started:
            logging.debug("Simulation.start called while already running; ignoring.")
            return
        self.clock = float(now_ms)
        self._sync_timers(self.clock)
        logging.info(f"Simulation started at t={self.clock:.0f}ms in state {self.state.name}.")

    def close(self) -> None:
        for timer in self.timers:
            timer.stop()
        self.spawn_pool.clear()
        logging.info("Simulation closed.")

    # --- Time evolution ---

    def update(self, now_ms: float) -> None:
        """
        Brings the whole engine up to now_ms.
        """
        if not self.started:
            self.start(now_ms)
            return
        now_ms = float(now_ms)
        if now_ms < self.clock:
            logging.debug(f"Ignoring update to {now_ms} which is before the clock ({self.clock}).")
            return

        while True:
            timer = self._next_due_timer(now_ms)
            if timer is None:
                break
            self._integrate(timer.next_due)
            timer.fire()

        self._integrate(now_ms)
        self.spawn_pool.expire(now_ms)

    def _next_due_timer(self, now_ms: float) -> Optional[IntervalTimer]:
        due = [t for t in self.timers if t.is_due(now_ms)]
        if not due:
            return None
        return min(due, key=lambda t: t.next_due)

    def _integrate(self, until_ms: float) -> None:
        """Advances the particles from the clock to until_ms if current flows."""
        elapsed = until_ms - self.clock
        if elapsed > 0 and self.battery.active:
            self.particles.advance(elapsed / 1000.0)
        self.clock = max(self.clock, until_ms)

    def _on_depletion_tick(self, due_ms: float) -> None:
        self.battery.tick()
        self._sync_timers(due_ms)

    def _on_spawn_tick(self, due_ms: float) -> None:
        self.spawn_pool.spawn(due_ms)

    def _sync_timers(self, now_ms: float) -> None:
        if self.battery.active:
            for timer in self.timers:
                timer.start(now_ms)
        else:
            for timer in self.timers:
                timer.stop()

    # --- Commands ---

    def toggle(self, now_ms: float) -> BatteryState:
        self.update(now_ms)
        state = self.battery.toggle()
        self._sync_timers(self.clock)
        return state

    def reset(self, now_ms: float) -> BatteryState:
        self.update(now_ms)
        state = self.battery.reset()
        self._sync_timers(self.clock)
        return state

    def press(self, now_ms: float) -> BatteryState:
        """The single user control: reset an exhausted battery, otherwise toggle."""
        self.update(now_ms)
        if self.battery.exhausted:
            return self.reset(now_ms)
        return self.toggle(now_ms)

    # --- Rendering ---

    def snapshot(self, now_ms: float) -> FrameSnapshot:
        self.update(now_ms)
        self.frame_count += 1
        return project_frame(
            self.particles, self.battery, self.spawn_pool, self.clock,
            field_step=self.field_line_step,
            vibration_amplitude=self.vibration_amplitude,
        )
