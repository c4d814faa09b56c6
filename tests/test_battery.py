"""Tests for the battery depletion state machine."""

import pytest

from battery import Battery, BatteryState

FULL = {"electrolyteLevel": 75.0, "ionCount": 75, "exhausted": False, "circuitClosed": False}


@pytest.fixture
def battery():
    return Battery()


def exhaust(battery):
    if not battery.circuit_closed:
        battery.toggle()
    for _ in range(15):
        battery.tick()


class TestTransitions:
    def test_starts_open_and_full(self, battery):
        assert battery.state is BatteryState.OPEN
        assert battery.as_dict() == FULL

    def test_toggle_flips_switch(self, battery):
        assert battery.toggle() is BatteryState.CLOSED_ACTIVE
        assert battery.toggle() is BatteryState.OPEN

    def test_tick_while_open_is_no_op(self, battery):
        battery.tick()
        assert battery.as_dict() == FULL

    def test_tick_depletes_both_quantities(self, battery):
        battery.toggle()
        battery.tick()
        assert battery.electrolyte_level == 70
        assert battery.ion_count == 70
        assert battery.state is BatteryState.CLOSED_ACTIVE


class TestExhaustion:
    def test_fifteen_ticks_exhaust(self, battery):
        battery.toggle()
        for i in range(14):
            battery.tick()
            assert not battery.exhausted
        assert battery.tick() is BatteryState.EXHAUSTED
        assert battery.electrolyte_level == 0
        assert battery.ion_count == 0

    def test_no_depletion_after_exhaustion(self, battery):
        exhaust(battery)
        battery.tick()
        battery.tick()
        assert battery.ticks == 15
        assert battery.electrolyte_level == 0
        assert battery.ion_count == 0

    def test_toggle_is_no_op_when_exhausted(self, battery):
        exhaust(battery)
        before = battery.as_dict()
        assert battery.toggle() is BatteryState.EXHAUSTED
        assert battery.as_dict() == before

    def test_quantities_clamp_independently(self):
        battery = Battery(electrolyte_initial=12, ion_initial=7, depletion_step=5)
        battery.toggle()
        battery.tick()
        assert (battery.electrolyte_level, battery.ion_count) == (7, 2)
        battery.tick()
        assert (battery.electrolyte_level, battery.ion_count) == (2, 0)
        assert not battery.exhausted
        battery.tick()
        assert (battery.electrolyte_level, battery.ion_count) == (0, 0)
        assert battery.exhausted


class TestReset:
    def test_reset_from_open(self, battery):
        battery.reset()
        assert battery.as_dict() == FULL

    def test_reset_from_active(self, battery):
        battery.toggle()
        battery.tick()
        battery.tick()
        assert battery.reset() is BatteryState.OPEN
        assert battery.as_dict() == FULL

    def test_reset_from_exhausted(self, battery):
        exhaust(battery)
        battery.reset()
        assert battery.as_dict() == FULL
        assert battery.toggle() is BatteryState.CLOSED_ACTIVE


class TestValidation:
    @pytest.mark.parametrize("kwargs", [
        {"electrolyte_initial": 0},
        {"ion_initial": -1},
        {"depletion_step": 0},
    ])
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(ValueError):
            Battery(**kwargs)
