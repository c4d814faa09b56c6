"""Tests for the self-expiring pool of battery-released electrons."""

import numpy as np
import pytest

from constants import SPAWN_REGION, SPAWN_TARGET
from spawn import SpawnPool


@pytest.fixture
def pool():
    return SpawnPool(rng=np.random.default_rng(5))


class TestLifetime:
    def test_progress_increases_until_expiry(self, pool):
        entry = pool.spawn(500.0)
        samples = np.arange(500.0, 1500.0, 50.0)
        progress = [pool.progress(entry, t) for t in samples]
        assert progress[0] == 0.0
        assert all(b > a for a, b in zip(progress, progress[1:]))
        assert all(p < 1.0 for p in progress)
        assert entry in pool.entries(1499.9)

    def test_absent_at_and_after_lifetime(self, pool):
        entry = pool.spawn(500.0)
        assert entry not in pool.entries(1500.0)
        assert entry not in pool.entries(2500.0)

    def test_expire_removes_only_old_entries(self, pool):
        pool.spawn(0.0)
        pool.spawn(200.0)
        pool.spawn(400.0)
        assert pool.expire(1200.0) == 2
        assert len(pool) == 1
        assert pool.expire(1399.0) == 0
        assert pool.expire(1400.0) == 1
        assert len(pool) == 0

    def test_progress_is_clamped(self, pool):
        entry = pool.spawn(1000.0)
        assert pool.progress(entry, 500.0) == 0.0
        assert pool.progress(entry, 5000.0) == 1.0

    def test_invalid_lifetime(self):
        with pytest.raises(ValueError):
            SpawnPool(lifetime_ms=0)


class TestInterpolation:
    def test_spawn_position_inside_region(self, pool):
        x0, y0, x1, y1 = SPAWN_REGION
        for t in range(0, 2000, 100):
            x, y = pool.spawn(float(t)).spawn_position
            assert x0 <= x <= x1
            assert y0 <= y <= y1

    def test_moves_toward_target_and_fades(self, pool):
        entry = pool.spawn(0.0)
        assert pool.position(entry, 0.0) == pytest.approx(entry.spawn_position)
        assert pool.opacity(entry, 0.0) == 1.0

        sx, sy = entry.spawn_position
        tx, ty = SPAWN_TARGET
        x, y = pool.position(entry, 250.0)
        assert x == pytest.approx(sx + 0.25 * (tx - sx))
        assert y == pytest.approx(sy + 0.25 * (ty - sy))
        assert pool.opacity(entry, 250.0) == pytest.approx(0.75)

    def test_ids_are_unique_and_increasing(self, pool):
        ids = [pool.spawn(float(t)).id for t in range(10)]
        assert ids == sorted(set(ids))

    def test_clear(self, pool):
        pool.spawn(0.0)
        pool.clear()
        assert len(pool) == 0
