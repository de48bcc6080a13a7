"""NumPy vectorized RK4 backend for a pendulum population.

All N bodies advance through each frame simultaneously as a single
(N, 4) NumPy array. Bodies share nothing, so this is equivalent to
stepping each PendulumState on its own with the same dt.

No in-place mutation: every stage builds a new array (states + delta,
never +=), so callers may keep references to earlier frames.

Physics equations here duplicate simulation.py's derivatives() but operate
on (N, 4) arrays. See test_numpy_backend.py for cross-validation tests.
"""

from __future__ import annotations

import numpy as np

from simulation import G


def derivatives_batch(
    states: np.ndarray, length: float, g: float = G,
) -> np.ndarray:
    """Compute derivatives for N bodies simultaneously.

    Args:
        states: (N, 4) array with columns [theta1, theta2, omega1, omega2].
        length: Common link length.
        g: Gravitational acceleration.

    Returns:
        (N, 4) array of derivatives [d_theta1, d_theta2, d_omega1, d_omega2].
    """
    theta1 = states[:, 0]
    theta2 = states[:, 1]
    omega1 = states[:, 2]
    omega2 = states[:, 3]

    delta = theta1 - theta2
    sin_delta = np.sin(delta)
    cos_delta = np.cos(delta)

    a1 = cos_delta / 2
    a2 = cos_delta
    f1 = -(omega2**2) * sin_delta / 2 - (g / length) * np.sin(theta1)
    f2 = (omega1**2) * sin_delta - (g / length) * np.sin(theta2)

    det = 1 - a1 * a2
    alpha1 = (f1 - a1 * f2) / det
    alpha2 = (-a2 * f1 + f2) / det

    result = np.empty_like(states, dtype=np.float64)
    result[:, 0] = omega1
    result[:, 1] = omega2
    result[:, 2] = alpha1
    result[:, 3] = alpha2

    return result


def rk4_step_batch(
    states: np.ndarray, dt: float, length: float, g: float = G,
) -> np.ndarray:
    """One classical RK4 step for every row of ``states``.

    No timestep guard is applied here; see Population.step().
    """
    # Overflow in chaotic or singular configurations is kept, not trapped
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        k1 = derivatives_batch(states, length, g)
        k2 = derivatives_batch(states + 0.5 * dt * k1, length, g)
        k3 = derivatives_batch(states + 0.5 * dt * k2, length, g)
        k4 = derivatives_batch(states + dt * k3, length, g)

        return states + (dt / 6.0) * (k1 + 2 * k2 + 2 * k3 + k4)


def total_energy_batch(
    states: np.ndarray, length: float, mass: float, g: float = G,
) -> np.ndarray:
    """Compute total energy for N bodies simultaneously.

    Args:
        states: (N, 4) float64 array [theta1, theta2, omega1, omega2].
        length: Common link length.
        mass: Common bob mass.
        g: Gravitational acceleration.

    Returns:
        (N,) float64 array of total energies (T + V).
    """
    theta1 = states[:, 0]
    theta2 = states[:, 1]
    omega1 = states[:, 2]
    omega2 = states[:, 3]

    kinetic = mass * length**2 * (
        omega1**2
        + 0.5 * omega2**2
        + omega1 * omega2 * np.cos(theta1 - theta2)
    )
    potential = -mass * g * length * (2 * np.cos(theta1) + np.cos(theta2))
    return kinetic + potential
