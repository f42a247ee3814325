import numpy as np

def long_horizon_rmse(truth, pred):
    return float(np.sqrt(np.mean((truth - pred)**2)))

def pendulum_energy(positions, velocities):
    """E = 1/2 v^2 - cos(x); conserved when lambda = 0."""
    return 0.5 * np.asarray(velocities)**2 - np.cos(np.asarray(positions))

def max_energy_drift(positions, velocities):
    E = pendulum_energy(positions, velocities)
    if E.size == 0:
        return 0.0
    return float(np.max(np.abs(E - E[0])))

def energy_change(positions, velocities):
    """E(end) - E(start); negative when damping removes energy."""
    E = pendulum_energy(positions, velocities)
    if E.size == 0:
        return 0.0
    return float(E[-1] - E[0])
