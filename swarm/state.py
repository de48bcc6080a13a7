"""Pendulum state: one double pendulum body and its angle trace.

A PendulumState owns its angles, angular velocities and a bounded
TraceBuffer of previous angle pairs. Geometry (origin, length, mass) is
fixed at construction. The body is advanced in place, once per frame,
by step().
"""

from __future__ import annotations

from collections import deque
from typing import Iterator

import numpy as np

from simulation import DISPLAY_SCALE, rk4_step, timestep_skipped
from simulation import endpoints as angle_endpoints

# Number of previous angle pairs kept per body
TRACE_CAPACITY = 144


class TraceBuffer:
    """Bounded history of (theta1, theta2) pairs, newest first.

    Pushing past capacity drops the oldest pair in the same call.
    """

    def __init__(self, capacity: int = TRACE_CAPACITY):
        self._pairs: deque[tuple[float, float]] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._pairs.maxlen

    def push(self, theta1: float, theta2: float) -> None:
        self._pairs.appendleft((theta1, theta2))

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[tuple[float, float]]:
        return iter(self._pairs)

    def __getitem__(self, index: int) -> tuple[float, float]:
        return self._pairs[index]


class PendulumState:
    """Physical state of one equal-mass, equal-length double pendulum.

    ``mass`` is stored for completeness but does not appear in the
    reduced equations of motion.
    """

    __slots__ = (
        "_origin", "_length", "_mass",
        "theta1", "theta2", "omega1", "omega2", "trace",
    )

    def __init__(
        self,
        origin: tuple[float, float],
        length: float,
        mass: float,
        theta1: float,
        theta2: float,
        omega1: float = 0.0,
        omega2: float = 0.0,
        trace: TraceBuffer | None = None,
    ):
        self._origin = (float(origin[0]), float(origin[1]))
        self._length = float(length)
        self._mass = float(mass)
        self.theta1 = float(theta1)
        self.theta2 = float(theta2)
        self.omega1 = float(omega1)
        self.omega2 = float(omega2)
        self.trace = trace if trace is not None else TraceBuffer()

    @classmethod
    def construct(
        cls,
        origin: tuple[float, float],
        length: float,
        mass: float,
        theta1_0: float,
        theta2_0: float,
    ) -> PendulumState:
        """Build a body at rest with an empty trace."""
        return cls(origin, length, mass, theta1_0, theta2_0)

    @property
    def origin(self) -> tuple[float, float]:
        return self._origin

    @property
    def length(self) -> float:
        return self._length

    @property
    def mass(self) -> float:
        return self._mass

    def as_array(self) -> np.ndarray:
        """Dynamic part as [theta1, theta2, omega1, omega2]."""
        return np.array(
            [self.theta1, self.theta2, self.omega1, self.omega2],
            dtype=np.float64,
        )

    def step(self, dt: float) -> None:
        """Advance the body by dt seconds in place.

        The pre-step angles always go into the trace. When dt is outside
        (0, MAX_TIMESTEP] the dynamic state is left exactly as it was.
        NaN or Inf coming out of the integrator is kept as is.
        """
        self.trace.push(self.theta1, self.theta2)

        if timestep_skipped(dt):
            return

        updated = rk4_step(self.as_array(), dt, self._length)
        self.theta1 = float(updated[0])
        self.theta2 = float(updated[1])
        self.omega1 = float(updated[2])
        self.omega2 = float(updated[3])

    def endpoints(
        self, scale: float = DISPLAY_SCALE,
    ) -> tuple[float, float, float, float]:
        """Bob offsets from the origin: (dx1, dy1, dx2, dy2)."""
        dx1, dy1, dx2, dy2 = angle_endpoints(
            self.theta1, self.theta2, self._length, scale,
        )
        return float(dx1), float(dy1), float(dx2), float(dy2)

    def trace_iterator(self) -> Iterator[tuple[float, float]]:
        """Previous angle pairs, newest first. Does not modify the trace."""
        return iter(self.trace)

    def __repr__(self) -> str:
        return (
            f"PendulumState(theta1={self.theta1:.6f}, theta2={self.theta2:.6f}, "
            f"omega1={self.omega1:.6f}, omega2={self.omega2:.6f}, "
            f"trace={len(self.trace)})"
        )


def construct(
    origin: tuple[float, float],
    length: float,
    mass: float,
    theta1_0: float,
    theta2_0: float,
) -> PendulumState:
    return PendulumState.construct(origin, length, mass, theta1_0, theta2_0)


def step(state: PendulumState, dt: float) -> None:
    state.step(dt)


def endpoints(
    state: PendulumState, scale: float = DISPLAY_SCALE,
) -> tuple[float, float, float, float]:
    return state.endpoints(scale)


def trace_iterator(state: PendulumState) -> Iterator[tuple[float, float]]:
    return state.trace_iterator()
