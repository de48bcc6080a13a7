"""Pendulum population: many independent bodies advanced together.

Bodies live in one contiguous (N, 4) float64 array and their traces in a
shared fixed-capacity ring buffer. Every body starts at the same base
angles; theta2 gets a small per-body offset so the swarm fans out over
time.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from swarm._numpy_backend import rk4_step_batch, total_energy_batch
from swarm.state import TRACE_CAPACITY, PendulumState, TraceBuffer
from simulation import DISPLAY_SCALE, endpoints, timestep_skipped

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationConfig:
    """Construction parameters for a population, applied on every reset."""

    count: int = 300
    origin: tuple[float, float] = (300.0, 300.0)
    length: float = 1.0
    mass: float = 1.0
    base_theta1_deg: float = 180.0
    base_theta2_deg: float = 180.0
    jitter_deg: float = 1.0      # one shared draw from [-jitter, jitter]
    offset_deg: float = 0.0001   # theta2 offset between consecutive bodies
    seed: int | None = None


def build_initial_angles(
    config: SimulationConfig, rng: np.random.Generator,
) -> np.ndarray:
    """Generate (count, 2) initial [theta1, theta2] in radians.

    theta1 is the same for every body. theta2 is the base angle plus one
    jitter value shared by the population plus offset_deg * i.
    """
    jitter = rng.uniform(-config.jitter_deg, config.jitter_deg)
    index = np.arange(config.count, dtype=np.float64)

    angles = np.empty((config.count, 2), dtype=np.float64)
    angles[:, 0] = math.radians(config.base_theta1_deg)
    angles[:, 1] = np.radians(
        config.base_theta2_deg + jitter + config.offset_deg * index
    )
    return angles


class TraceRing:
    """Fixed-capacity ring buffer of angle pairs for N bodies.

    All bodies are pushed together, so one head index serves the whole
    population. Storage is (N, capacity, 2); reads come back newest first.
    """

    def __init__(self, n_bodies: int, capacity: int = TRACE_CAPACITY):
        self._buffer = np.zeros((n_bodies, capacity, 2), dtype=np.float64)
        self._head = 0   # slot for the next push
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._buffer.shape[1]

    def __len__(self) -> int:
        return self._size

    def push(self, angles: np.ndarray) -> None:
        """Store one (N, 2) angle frame, overwriting the oldest when full."""
        self._buffer[:, self._head] = angles
        self._head = (self._head + 1) % self.capacity
        self._size = min(self._size + 1, self.capacity)

    def _order(self) -> np.ndarray:
        return (self._head - 1 - np.arange(self._size)) % self.capacity

    def view(self) -> np.ndarray:
        """(N, size, 2) copy of all traces, newest first."""
        return self._buffer[:, self._order()]

    def for_body(self, index: int) -> np.ndarray:
        """(size, 2) copy of one body's trace, newest first."""
        return self._buffer[index, self._order()]


class Population:
    """Arena of independent double pendulums sharing one timestep per tick."""

    def __init__(
        self,
        config: SimulationConfig | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.config = config if config is not None else SimulationConfig()
        # A caller-supplied generator is used as is; otherwise config.seed
        # (when set) reseeds it on every reset so restarts repeat exactly.
        self._own_rng = rng is None
        self._rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.reset()

    @classmethod
    def from_config(cls, config: SimulationConfig) -> Population:
        return cls(config)

    def reset(self) -> None:
        """Discard every body and trace and seed a fresh population."""
        config = self.config
        if self._own_rng and config.seed is not None:
            self._rng = np.random.default_rng(config.seed)

        angles = build_initial_angles(config, self._rng)
        states = np.zeros((config.count, 4), dtype=np.float64)
        states[:, :2] = angles

        self.states = states
        self.trace = TraceRing(config.count)
        self.ticks = 0

        logger.info(
            "Seeded %d pendulums at theta1=%.1f deg, theta2=%.1f deg",
            config.count, config.base_theta1_deg, config.base_theta2_deg,
        )

    def __len__(self) -> int:
        return self.states.shape[0]

    @property
    def origin(self) -> tuple[float, float]:
        return self.config.origin

    @property
    def length(self) -> float:
        return self.config.length

    @property
    def mass(self) -> float:
        return self.config.mass

    def step(self, dt: float) -> None:
        """Advance every body by the same dt.

        Pre-step angles are pushed into the trace first, then the step is
        dropped (not clamped) if dt is outside (0, MAX_TIMESTEP].
        """
        self.trace.push(self.states[:, :2])
        self.ticks += 1

        if timestep_skipped(dt):
            logger.debug("Skipping tick %d with dt=%.4f s", self.ticks, dt)
            return

        self.states = rk4_step_batch(self.states, dt, self.length)

    def endpoints(self, scale: float = DISPLAY_SCALE) -> np.ndarray:
        """(N, 4) array of bob offsets [dx1, dy1, dx2, dy2]."""
        dx1, dy1, dx2, dy2 = endpoints(
            self.states[:, 0], self.states[:, 1], self.length, scale,
        )
        return np.column_stack((dx1, dy1, dx2, dy2))

    def trace_points(self, index: int) -> np.ndarray:
        """(k, 2) previous [theta1, theta2] of one body, newest first."""
        return self.trace.for_body(index)

    def trace_offsets(self, scale: float = DISPLAY_SCALE) -> np.ndarray:
        """(N, k, 2) second-bob offsets [dx2, dy2] along every trace."""
        angles = self.trace.view()
        _, _, dx2, dy2 = endpoints(
            angles[..., 0], angles[..., 1], self.length, scale,
        )
        return np.stack((dx2, dy2), axis=-1)

    def body(self, index: int) -> PendulumState:
        """Snapshot of one body as a standalone PendulumState."""
        theta1, theta2, omega1, omega2 = self.states[index]
        trace = TraceBuffer(self.trace.capacity)
        for t1, t2 in self.trace.for_body(index)[::-1]:
            trace.push(float(t1), float(t2))
        return PendulumState(
            self.origin, self.length, self.mass,
            theta1, theta2, omega1, omega2, trace,
        )

    def total_energy(self) -> np.ndarray:
        """(N,) total mechanical energy of each body."""
        return total_energy_batch(
            self.states, self.length, self.mass,
        )
