"""Tests for swarm/population.py: seeding, batched stepping, ring-buffer traces."""

import logging
import math

import numpy as np
import pytest

from simulation import MAX_TIMESTEP
from swarm.population import (
    Population, SimulationConfig, TraceRing, build_initial_angles,
)
from swarm.state import TRACE_CAPACITY, PendulumState


def _config(**overrides):
    defaults = dict(count=12, seed=3)
    defaults.update(overrides)
    return SimulationConfig(**defaults)


class TestSimulationConfig:

    def test_defaults(self):
        config = SimulationConfig()
        assert config.count == 300
        assert config.origin == (300.0, 300.0)
        assert config.length == 1.0
        assert config.base_theta1_deg == 180.0
        assert config.offset_deg == 0.0001

    def test_frozen(self):
        config = SimulationConfig()
        with pytest.raises(AttributeError):
            config.count = 5


class TestBuildInitialAngles:

    def test_shape_and_theta1(self):
        angles = build_initial_angles(_config(), np.random.default_rng(0))
        assert angles.shape == (12, 2)
        assert np.all(angles[:, 0] == math.pi)

    def test_theta2_offsets_are_uniform(self):
        config = _config(offset_deg=0.5)
        angles = build_initial_angles(config, np.random.default_rng(0))
        steps = np.diff(angles[:, 1])
        np.testing.assert_allclose(steps, math.radians(0.5), rtol=1e-9)

    def test_jitter_within_bounds(self):
        config = _config(jitter_deg=1.0)
        for seed in range(20):
            angles = build_initial_angles(config, np.random.default_rng(seed))
            first = math.degrees(angles[0, 1])
            assert 179.0 <= first <= 181.0

    def test_no_jitter(self):
        config = _config(jitter_deg=0.0, base_theta2_deg=90.0, offset_deg=1.0)
        angles = build_initial_angles(config, np.random.default_rng(0))
        assert angles[0, 1] == pytest.approx(math.pi / 2)
        assert angles[2, 1] == pytest.approx(math.radians(92.0))


class TestTraceRing:
    """Fixed-capacity ring buffer with a shared head index."""

    def test_newest_first(self):
        ring = TraceRing(2, capacity=4)
        for k in range(3):
            ring.push(np.array([[k, -k], [10 + k, -10 - k]], dtype=float))
        assert len(ring) == 3
        np.testing.assert_array_equal(ring.for_body(0)[:, 0], [2, 1, 0])
        np.testing.assert_array_equal(ring.for_body(1)[:, 0], [12, 11, 10])

    def test_wraps_and_evicts_oldest(self):
        ring = TraceRing(1, capacity=4)
        for k in range(10):
            ring.push(np.array([[k, k]], dtype=float))
        assert len(ring) == 4
        np.testing.assert_array_equal(ring.for_body(0)[:, 0], [9, 8, 7, 6])
        assert ring.view().shape == (1, 4, 2)

    def test_reads_are_copies(self):
        ring = TraceRing(1, capacity=4)
        ring.push(np.array([[1.0, 2.0]]))
        snapshot = ring.for_body(0)
        snapshot[0, 0] = 99.0
        assert ring.for_body(0)[0, 0] == 1.0


class TestPopulationStep:

    def test_matches_individual_bodies(self):
        """Batched stepping is equivalent to stepping each body alone."""
        population = Population(_config())
        bodies = [population.body(i) for i in range(len(population))]

        for dt in [0.01, 0.016, 0.05, 0.008, 0.0, 0.012]:
            population.step(dt)
            for body in bodies:
                body.step(dt)

        for i, body in enumerate(bodies):
            np.testing.assert_allclose(
                population.states[i], body.as_array(), rtol=1e-10, atol=1e-12,
            )
            np.testing.assert_allclose(
                population.trace_points(i), np.array(list(body.trace_iterator())),
                rtol=1e-10, atol=1e-12,
            )

    @pytest.mark.parametrize("dt", [0.0, -1.0, MAX_TIMESTEP + 1e-6, 1.0])
    def test_skipped_tick_records_trace_only(self, dt):
        population = Population(_config())
        population.step(0.01)
        before = population.states.copy()

        population.step(dt)

        np.testing.assert_array_equal(population.states, before)
        assert len(population.trace) == 2
        np.testing.assert_array_equal(population.trace_points(0)[0], before[0, :2])

    def test_skipped_tick_is_logged_at_debug(self, caplog):
        population = Population(_config())
        with caplog.at_level(logging.DEBUG, logger="swarm.population"):
            population.step(0.5)
        assert "Skipping tick" in caplog.text

    def test_trace_bounded(self):
        population = Population(_config(count=3))
        for _ in range(TRACE_CAPACITY + 50):
            population.step(0.01)
        assert len(population.trace) == TRACE_CAPACITY
        assert population.trace_points(2).shape == (TRACE_CAPACITY, 2)
        assert population.ticks == TRACE_CAPACITY + 50

    def test_bodies_fan_out(self):
        """Neighbouring bodies start 1e-4 degrees apart and separate."""
        population = Population(_config(count=50, seed=11))
        initial_spread = np.ptp(population.states[:, 1])
        for _ in range(1500):
            population.step(0.01)
        final_spread = max(np.ptp(population.states[:, 0]),
                           np.ptp(population.states[:, 1]))
        assert final_spread > 100 * initial_spread


class TestPopulationLifecycle:

    def test_starts_at_rest(self):
        population = Population(_config())
        assert population.states.shape == (12, 4)
        assert np.all(population.states[:, 2:] == 0.0)
        assert len(population.trace) == 0
        assert population.ticks == 0

    def test_reset_discards_everything(self):
        population = Population(_config())
        initial = population.states.copy()
        for _ in range(20):
            population.step(0.01)

        population.reset()

        np.testing.assert_array_equal(population.states, initial)
        assert len(population.trace) == 0
        assert population.ticks == 0

    def test_reset_without_seed_redraws_jitter(self):
        population = Population(
            _config(seed=None), rng=np.random.default_rng(123),
        )
        first = population.states[0, 1]
        population.reset()
        assert population.states[0, 1] != first

    def test_from_config(self):
        population = Population.from_config(_config(count=4))
        assert len(population) == 4
        assert population.origin == (300.0, 300.0)

    def test_reset_is_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="swarm.population"):
            Population(_config(count=7))
        assert "Seeded 7 pendulums" in caplog.text


class TestPopulationViews:

    def test_body_snapshot(self):
        population = Population(_config())
        for _ in range(5):
            population.step(0.01)
        body = population.body(3)

        assert isinstance(body, PendulumState)
        assert body.origin == population.origin
        np.testing.assert_array_equal(body.as_array(), population.states[3])
        assert len(body.trace) == 5
        assert body.trace[0] == tuple(population.trace_points(3)[0])

    def test_body_out_of_range(self):
        population = Population(_config(count=2))
        with pytest.raises(IndexError):
            population.body(5)

    def test_endpoints_match_bodies(self):
        population = Population(_config())
        population.step(0.01)
        ends = population.endpoints()
        assert ends.shape == (12, 4)
        for i in (0, 5, 11):
            assert tuple(ends[i]) == pytest.approx(population.body(i).endpoints())

    def test_trace_offsets(self):
        population = Population(_config(count=3))
        assert population.trace_offsets().shape == (3, 0, 2)
        for _ in range(4):
            population.step(0.01)
        offsets = population.trace_offsets()
        assert offsets.shape == (3, 4, 2)
        theta1, theta2 = population.trace_points(1)[0]
        expected_dx2 = 100.0 * (math.sin(theta1) + math.sin(theta2))
        assert offsets[1, 0, 0] == pytest.approx(expected_dx2)

    def test_total_energy_constant_under_small_steps(self):
        population = Population(_config(count=4, base_theta1_deg=30.0,
                                        base_theta2_deg=20.0))
        e0 = population.total_energy()
        for _ in range(500):
            population.step(0.002)
        np.testing.assert_allclose(population.total_energy(), e0, rtol=1e-6)


class TestPopulationRng:
    """Test where the per-restart jitter comes from."""

    def test_seed_repeats_on_reset(self):
        population = Population(_config(seed=5))
        first = population.states.copy()
        population.reset()
        np.testing.assert_array_equal(population.states, first)

    def test_supplied_rng_wins_over_seed(self):
        """An explicit generator is never replaced by config.seed."""
        population = Population(_config(seed=5),
                                rng=np.random.default_rng(99))
        seeded = Population(_config(seed=5))
        assert population.states[0, 1] != seeded.states[0, 1]

        first = population.states[0, 1]
        population.reset()
        assert population.states[0, 1] != first

    def test_supplied_rng_is_used(self):
        population = Population(_config(seed=None),
                                rng=np.random.default_rng(7))
        expected = build_initial_angles(_config(seed=None),
                                        np.random.default_rng(7))
        np.testing.assert_array_equal(population.states[:, :2], expected)


class TestFullTraceKeepsAdvancing:

    def test_frame_sized_steps_after_trace_fills(self):
        """Once the trace is full, in-budget ticks still move every body."""
        population = Population(_config(count=50))
        for _ in range(TRACE_CAPACITY + 20):
            population.step(1 / 60)
        assert len(population.trace) == TRACE_CAPACITY

        before = population.states.copy()
        population.step(1 / 60)
        assert np.all(population.states[:, 2] != before[:, 2])
        np.testing.assert_array_equal(population.trace_points(0)[0],
                                      before[0, :2])

    def test_geometry_properties(self):
        population = Population(_config(length=2.0, mass=3.0))
        assert population.length == 2.0
        assert population.mass == 3.0
        assert population.body(0).length == 2.0
