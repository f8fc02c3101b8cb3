"""
Tests for ZoneState class and the daily usage profile.
"""

import random
from datetime import UTC, datetime, timedelta

import pytest

from src.core.zones import DEFAULT_ZONES
from src.generator.models import InjectedAnomaly
from src.generator.zone_state import ZoneState, time_of_day_factor

ZONES = {zone.id: zone for zone in DEFAULT_ZONES}

# Mid-afternoon, within every zone's operating hours
AFTERNOON = datetime(2026, 1, 14, 14, 0, 1, tzinfo=UTC)


def make_state(zone_id="assembly-1", seed=7, **kwargs):
    return ZoneState(ZONES[zone_id], random.Random(seed), **kwargs)


class TestTimeOfDayFactor:
    """Tests for the daily usage multiplier."""

    def test_peaks_mid_working_day(self):
        assert time_of_day_factor(13) == pytest.approx(1.2)
        assert time_of_day_factor(8) == pytest.approx(1.0)

    @pytest.mark.parametrize("hour", range(24))
    def test_bounded(self, hour):
        assert 0.5 <= time_of_day_factor(hour) <= 1.2

    def test_nights_are_quieter_than_days(self):
        assert max(time_of_day_factor(h) for h in range(0, 8)) < min(
            time_of_day_factor(h) for h in range(8, 18)
        )


class TestZoneState:
    """Tests for reading generation of a single zone."""

    def test_reading_structure(self):
        reading = make_state().generate_reading(timestamp=AFTERNOON)

        assert set(reading) == {
            "timestamp",
            "zoneId",
            "zoneName",
            "energyKw",
            "temperature",
            "equipmentCount",
        }
        assert reading["timestamp"] == "2026-01-14T14:00:01Z"
        assert reading["zoneId"] == "assembly-1"
        assert reading["zoneName"] == "Assembly Line 1"
        assert reading["equipmentCount"] == 12

    @pytest.mark.parametrize("zone_id", sorted(set(ZONES) - {"stamping-press"}))
    def test_normal_energy_stays_near_expected_range(self, zone_id):
        """Without anomalies, readings stay inside the detector's tolerance band."""
        state = make_state(zone_id)
        expected = ZONES[zone_id].expected_range

        for i in range(200):
            energy = state.generate_energy(AFTERNOON + timedelta(seconds=i))
            assert 0.5 * expected.min < energy < 1.5 * expected.max

    def test_stamping_press_cycle(self):
        """Presses draw 30% more during the first three seconds of every ten."""
        in_cycle = make_state("stamping-press", seed=5).generate_energy(AFTERNOON)
        idle = make_state("stamping-press", seed=5).generate_energy(
            AFTERNOON + timedelta(seconds=4)
        )

        assert in_cycle == pytest.approx(idle * 1.3)

    def test_scheduled_zone_idles_outside_hours(self):
        state = make_state("paint-shop")
        night = datetime(2026, 1, 14, 2, 0, 0, tzinfo=UTC)

        for i in range(50):
            energy = state.generate_energy(night + timedelta(seconds=i))
            # 10-20% of the base load, plus noise
            assert energy < 0.25 * ZONES["paint-shop"].expected_range.max

    def test_same_seed_same_readings(self):
        first = make_state(seed=3)
        second = make_state(seed=3)

        for i in range(10):
            timestamp = AFTERNOON + timedelta(seconds=i)
            assert first.generate_reading(timestamp=timestamp) == second.generate_reading(
                timestamp=timestamp
            )

    def test_spike_doubles_energy(self):
        normal = make_state(seed=11).generate_energy(AFTERNOON)
        spiked = make_state(seed=11).generate_energy(AFTERNOON, InjectedAnomaly.SPIKE)

        # Same random draws, so only the multiplier differs
        assert spiked == pytest.approx(normal * 2.0)

    def test_drop_halves_energy(self):
        normal = make_state(seed=11).generate_energy(AFTERNOON)
        dropped = make_state(seed=11).generate_energy(AFTERNOON, InjectedAnomaly.DROP)

        assert dropped == pytest.approx(normal * 0.5)

    def test_flatline_holds_value(self):
        state = make_state(flatline_duration_seconds=30)

        state.generate_energy(AFTERNOON, InjectedAnomaly.FLATLINE)
        assert state.flatlined
        stuck = state.flatline_value

        for i in range(1, 30):
            assert state.generate_energy(AFTERNOON + timedelta(seconds=i)) == stuck

    def test_flatline_expires(self):
        state = make_state(flatline_duration_seconds=30)

        state.generate_energy(AFTERNOON, InjectedAnomaly.FLATLINE)
        state.generate_energy(AFTERNOON + timedelta(seconds=31))

        assert not state.flatlined
        assert state.flatline_value is None

    def test_temperature_tracks_energy(self):
        state = make_state()
        baseline = ZONES["assembly-1"].baseline_temperature

        low = state.generate_temperature(125.0)
        high = state.generate_temperature(500.0)

        assert low < baseline < high
