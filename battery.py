# battery.py
"""
The battery depletion state machine.

The battery owns the circuit switch. While the circuit is closed and the
battery is not exhausted, each depletion tick lowers the electrolyte level
and the zinc ion count together. When the electrolyte runs out the battery
is exhausted and stays that way until reset.
"""
import enum
import logging

from constants import DEFAULT_ELECTROLYTE_LEVEL, DEFAULT_ION_COUNT, DEFAULT_DEPLETION_STEP

# --- Data Contracts ---
#
# class Battery:
#   - __init__(self, electrolyte_initial, ion_initial, depletion_step):
#     - Raises ValueError for non-positive values.
#     - Starts OPEN with full charge.
#
#   - toggle(self) -> BatteryState: flips the switch; no-op when EXHAUSTED.
#   - tick(self) -> BatteryState: one depletion step; no-op unless CLOSED_ACTIVE.
#   - reset(self) -> BatteryState: always back to OPEN with full charge.
#
#   - Invariants:
#     - 0 <= electrolyte_level <= electrolyte_initial
#     - 0 <= ion_count <= ion_initial
#     - exhausted implies electrolyte_level == 0 and no further depletion.


class BatteryState(enum.Enum):
    CLOSED_ACTIVE = "closed_active"
    OPEN = "open"
    EXHAUSTED = "exhausted"


class Battery:
    """
    Tracks the switch, the two depleting quantities and the terminal state.
    """
    def __init__(
        self,
        electrolyte_initial: float = DEFAULT_ELECTROLYTE_LEVEL,
        ion_initial: int = DEFAULT_ION_COUNT,
        depletion_step: int = DEFAULT_DEPLETION_STEP,
    ):
        for name, value in (
            ("electrolyte_initial", electrolyte_initial),
            ("ion_initial", ion_initial),
            ("depletion_step", depletion_step),
        ):
            if value <= 0:
                msg = f"Configuration error: {name} must be positive, got {value!r}."
                logging.critical(msg)
                raise ValueError(msg)

        self.electrolyte_initial = float(electrolyte_initial)
        self.ion_initial = int(ion_initial)
        self.depletion_step = depletion_step

        self.circuit_closed = False
        self.electrolyte_level = self.electrolyte_initial
        self.ion_count = self.ion_initial
        self.exhausted = False
        self.ticks = 0

    @property
    def state(self) -> BatteryState:
        if self.exhausted:
            return BatteryState.EXHAUSTED
        if self.circuit_closed:
            return BatteryState.CLOSED_ACTIVE
        return BatteryState.OPEN

    @property
    def active(self) -> bool:
        return self.state is BatteryState.CLOSED_ACTIVE

    def toggle(self) -> BatteryState:
        if self.exhausted:
            logging.debug("Toggle ignored: battery is exhausted, reset required.")
            return self.state
        self.circuit_closed = not self.circuit_closed
        logging.info(f"Circuit {'closed' if self.circuit_closed else 'opened'}.")
        return self.state

    def tick(self) -> BatteryState:
        """
        Applies one depletion step. Both quantities clamp at zero on their own.
        """
        if not self.active:
            return self.state

        self.electrolyte_level = max(0.0, self.electrolyte_level - self.depletion_step)
        self.ion_count = max(0, self.ion_count - int(self.depletion_step))
        self.ticks += 1
        logging.debug(
            f"Depletion tick {self.ticks}: electrolyte={self.electrolyte_level}, "
            f"ions={self.ion_count}"
        )

        if self.electrolyte_level == 0:
            self.exhausted = True
            logging.info(f"Battery exhausted after {self.ticks} depletion ticks.")
        return self.state

    def reset(self) -> BatteryState:
        self.circuit_closed = False
        self.electrolyte_level = self.electrolyte_initial
        self.ion_count = self.ion_initial
        self.exhausted = False
        self.ticks = 0
        logging.info("Battery reset to full charge, circuit open.")
        return self.state

    def as_dict(self) -> dict:
        return {
            "electrolyteLevel": self.electrolyte_level,
            "ionCount": self.ion_count,
            "exhausted": self.exhausted,
            "circuitClosed": self.circuit_closed,
        }
