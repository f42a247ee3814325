import logging
import math
import numpy as np
from dataclasses import dataclass, replace
from tqdm import tqdm

logger = logging.getLogger(__name__)

MIN_SPAN = 15.0

@dataclass
class OscillatorParams:
    lam: float = 3.0
    N: float = 3.0

@dataclass(frozen=True)
class IntegrationParameters:
    begin: float = 0.0
    end: float = 10.0
    h: float = 0.01
    lam: float = 3.0
    v0: float = 1.0
    N: float = 3.0

    @classmethod
    def from_fields(cls, begin="", end="", h="", lam="", v0="", N=""):
        """
        Parse text fields; a blank field takes its default.
        A span shorter than MIN_SPAN is widened by MIN_SPAN.
        """
        defaults = cls()
        raw = {"begin": begin, "end": end, "h": h, "lam": lam, "v0": v0, "N": N}
        values = {}
        for name, text in raw.items():
            text = str(text).strip()
            if text == "":
                values[name] = getattr(defaults, name)
                continue
            try:
                values[name] = float(text)
            except ValueError:
                raise ValueError(f"field '{name}' is not a number: {text!r}") from None
        if values["end"] - values["begin"] < MIN_SPAN:
            values["end"] += MIN_SPAN
        return cls(**values)

    def extended(self, by: float = 10.0):
        return replace(self, end=self.end + by)

    @property
    def rhs_params(self) -> OscillatorParams:
        return OscillatorParams(lam=self.lam, N=self.N)

@dataclass(frozen=True, eq=False)
class Trajectory:
    times: np.ndarray
    positions: np.ndarray
    velocities: np.ndarray
    final_state: tuple

    def __len__(self):
        return len(self.times)

def oscillator_rhs(state, t, params: OscillatorParams):
    x, v = state
    dx = v
    dv = -(params.lam * v * np.cos(params.N * x) + np.sin(x))
    return np.array([dx, dv])

def n_samples(begin: float, end: float, h: float) -> int:
    if not h > 0 or not end > begin:
        return 0
    steps = (end - begin) / h
    if not math.isfinite(steps):
        return 0
    return int(math.ceil(steps))

def _run(begin, end, h, params: OscillatorParams, v0):
    n = n_samples(begin, end, h)
    x = np.zeros((n, 2))
    s = np.array([begin, v0], dtype=np.float64)
    for k in range(n):
        x[k] = s
        t = begin + k * h
        # RK4
        k1 = oscillator_rhs(s, t, params)
        k2 = oscillator_rhs(s + 0.5 * h * k1, t + 0.5 * h, params)
        k3 = oscillator_rhs(s + 0.5 * h * k2, t + 0.5 * h, params)
        k4 = oscillator_rhs(s + h * k3, t + h, params)
        s = s + (h / 6.0) * (k1 + 2 * k2 + 2 * k3 + k4)
    logger.debug("integrated %d steps on [%g, %g) with h=%g", n, begin, end, h)
    return x, s

def integrate(begin: float, end: float, h: float, lam: float, v0: float, N: float):
    """
    Fixed-step RK4 for x'' = -(lam*x'*cos(N*x) + sin(x)), x(begin) = begin, x'(begin) = v0.
    Returns (positions, velocities), one sample per step taken, recorded before the step.
    """
    x, _ = _run(begin, end, h, OscillatorParams(lam=lam, N=N), v0)
    return x[:, 0].copy(), x[:, 1].copy()

def _frozen(a):
    a = np.ascontiguousarray(a, dtype=np.float64)
    a.setflags(write=False)
    return a

def simulate_oscillator(params: IntegrationParameters) -> Trajectory:
    x, s = _run(params.begin, params.end, params.h, params.rhs_params, params.v0)
    t = params.begin + params.h * np.arange(len(x))
    return Trajectory(
        times=_frozen(t),
        positions=_frozen(x[:, 0]),
        velocities=_frozen(x[:, 1]),
        final_state=(float(s[0]), float(s[1])),
    )

def sweep_initial_velocities(params: IntegrationParameters, velocities=range(-5, 6), progress=False):
    """Return one trajectory per initial velocity, sharing every other parameter."""
    runs = []
    for v0 in tqdm(list(velocities), disable=not progress, desc="v0 sweep"):
        runs.append(simulate_oscillator(replace(params, v0=float(v0))))
    return runs
