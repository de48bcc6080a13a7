"""Double pendulum physics engine.

Equations of motion for a double pendulum with equal link lengths and
equal point masses, a fixed-step RK4 stepper, and a SciPy reference
integrator used to check the stepper.

With l1 = l2 = L and m1 = m2 the Lagrangian equations reduce to

    alpha1 + a1 * alpha2 = f1
    a2 * alpha1 + alpha2 = f2

and the masses cancel out, so mass only enters the energy.
"""

import numpy as np
from scipy.integrate import solve_ivp

G = 9.81

# Frames slower than this are dropped instead of integrated
MAX_TIMESTEP = 0.02

# Display units per length unit
DISPLAY_SCALE = 100.0


def derivatives(t, state, length, g=G):
    """Compute the four first-order ODEs for the double pendulum.

    State vector: [theta1, theta2, omega1, omega2]
    Returns: [d_theta1/dt, d_theta2/dt, d_omega1/dt, d_omega2/dt]

    ``t`` is unused; it is accepted so the function plugs into solve_ivp.
    """
    theta1, theta2, omega1, omega2 = state

    delta = theta1 - theta2
    sin_delta = np.sin(delta)
    cos_delta = np.cos(delta)

    a1 = cos_delta / 2
    a2 = cos_delta
    f1 = -(omega2**2) * sin_delta / 2 - (g / length) * np.sin(theta1)
    f2 = (omega1**2) * sin_delta - (g / length) * np.sin(theta2)

    # No guard on the determinant: non-finite values are allowed to propagate
    det = 1 - a1 * a2
    alpha1 = (f1 - a1 * f2) / det
    alpha2 = (-a2 * f1 + f2) / det

    return np.array([omega1, omega2, alpha1, alpha2], dtype=np.float64)


def timestep_skipped(dt):
    """True when a frame of length ``dt`` must not be integrated.

    Oversized steps (the host stalled, the window was dragged) are dropped
    silently rather than clamped; clamping would change the trajectory.
    """
    return dt <= 0.0 or dt > MAX_TIMESTEP


def rk4_step(state, dt, length, g=G):
    """Advance [theta1, theta2, omega1, omega2] by one classical RK4 step.

    Pure: returns a new array and applies no timestep guard.
    """
    state = np.asarray(state, dtype=np.float64)

    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        k1 = derivatives(0.0, state, length, g)
        k2 = derivatives(0.0, state + (dt / 2) * k1, length, g)
        k3 = derivatives(0.0, state + (dt / 2) * k2, length, g)
        k4 = derivatives(0.0, state + dt * k3, length, g)

        return state + (dt / 6.0) * (k1 + 2 * k2 + 2 * k3 + k4)


def rk4_integrate(state, dt, n_steps, length, g=G):
    """Repeat rk4_step n_steps times.

    Returns:
        2D array of shape (n_steps + 1, 4); row 0 is the initial state.
    """
    trajectory = np.empty((n_steps + 1, 4), dtype=np.float64)
    trajectory[0] = state
    for i in range(n_steps):
        trajectory[i + 1] = rk4_step(trajectory[i], dt, length, g)
    return trajectory


def simulate(theta1_0, theta2_0, omega1_0=0.0, omega2_0=0.0,
             length=1.0, t_end=30.0, dt=0.005, g=G):
    """Run a high-accuracy reference simulation at uniform spacing.

    Returns:
        t_array: 1D array of time values at uniform dt spacing
        state_array: 2D array of shape (len(t_array), 4)
    """
    t_eval = np.arange(0, t_end, dt)
    y0 = [theta1_0, theta2_0, omega1_0, omega2_0]

    sol = solve_ivp(
        fun=lambda t, y: derivatives(t, y, length, g),
        t_span=(0, t_end),
        y0=y0,
        method="DOP853",
        t_eval=t_eval,
        rtol=1e-14,
        atol=1e-14,
    )

    return sol.t, sol.y.T  # shape: (n_steps, 4)


def endpoints(theta1, theta2, length, scale=DISPLAY_SCALE):
    """Offsets of both bobs from the pivot in display units.

    Returns (dx1, dy1, dx2, dy2) with y pointing down the screen.
    Works elementwise on arrays.
    """
    sin1, cos1 = np.sin(theta1), np.cos(theta1)
    sin2, cos2 = np.sin(theta2), np.cos(theta2)
    reach = length * scale

    dx1 = reach * sin1
    dy1 = reach * cos1
    dx2 = reach * (sin1 + sin2)
    dy2 = reach * (cos1 + cos2)

    return dx1, dy1, dx2, dy2


def total_energy(state, length, mass, g=G):
    """Compute total mechanical energy (T + V) for a single state.

    Potential energy is measured from the pivot point.
    """
    theta1, theta2, omega1, omega2 = state

    # Kinetic energy, m1 = m2 = mass and l1 = l2 = length
    T = mass * length**2 * (
        omega1**2
        + 0.5 * omega2**2
        + omega1 * omega2 * np.cos(theta1 - theta2)
    )

    # Potential energy (from pivot)
    V = -mass * g * length * (2 * np.cos(theta1) + np.cos(theta2))

    return T + V
