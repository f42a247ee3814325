import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple
import numpy as np

logger = logging.getLogger(__name__)

class SplineSegment(NamedTuple):
    """Cubic a + b*dx + c/2*dx^2 + d/6*dx^3 with dx = query - x."""
    a: float
    b: float
    c: float
    d: float
    x: float

    def __call__(self, query):
        dx = query - self.x
        return self.a + (self.b + (self.c / 2.0 + self.d * dx / 6.0) * dx) * dx

def _readonly(a):
    a.setflags(write=False)
    return a

@dataclass(frozen=True, eq=False)
class SplineModel:
    """
    Natural cubic spline through ordered nodes.
    Node i (i >= 1) carries the cubic of the interval [x[i-1], x[i]], anchored at x[i].
    Node 0 only stores a, c and x; its b and d are NaN.
    """
    x: np.ndarray
    a: np.ndarray
    b: np.ndarray
    c: np.ndarray
    d: np.ndarray

    @classmethod
    def build(cls, x, y, n: Optional[int] = None) -> "SplineModel":
        """
        x must be strictly increasing without duplicates, n >= 2. Neither is checked:
        a repeated node divides by zero and shows up as inf/nan in the coefficients,
        and a model with fewer than two nodes has no segment, so it evaluates to NaN.
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        if n is None:
            n = len(x)
        x = x[:n].copy()
        a = y[:n].copy()
        b = np.full(n, np.nan)
        c = np.zeros(n)
        d = np.full(n, np.nan)

        # Thomas algorithm for the interior c[i]; c[0] = c[n-1] = 0
        alpha = np.zeros(max(n - 1, 1))
        beta = np.zeros(max(n - 1, 1))
        with np.errstate(divide="ignore", invalid="ignore"):
            for i in range(1, n - 1):
                h_i, h_i1 = x[i] - x[i - 1], x[i + 1] - x[i]
                A = h_i
                C = 2.0 * (h_i + h_i1)
                B = h_i1
                F = 6.0 * ((a[i + 1] - a[i]) / h_i1 - (a[i] - a[i - 1]) / h_i)
                z = A * alpha[i - 1] + C
                alpha[i] = -B / z
                beta[i] = (F - A * beta[i - 1]) / z
            for i in range(n - 2, 0, -1):
                c[i] = alpha[i] * c[i + 1] + beta[i]

            for i in range(n - 1, 0, -1):
                h_i = x[i] - x[i - 1]
                d[i] = (c[i] - c[i - 1]) / h_i
                b[i] = h_i * (2.0 * c[i] + c[i - 1]) / 6.0 + (a[i] - a[i - 1]) / h_i

        logger.debug("built natural cubic spline on %d nodes", n)
        return cls(x=_readonly(x), a=_readonly(a), b=_readonly(b), c=_readonly(c), d=_readonly(d))

    def __len__(self):
        return len(self.x)

    def segment(self, i: int) -> SplineSegment:
        return SplineSegment(float(self.a[i]), float(self.b[i]), float(self.c[i]),
                             float(self.d[i]), float(self.x[i]))

    @property
    def segments(self) -> Tuple[SplineSegment, ...]:
        return tuple(self.segment(i) for i in range(len(self)))

    def segment_index(self, query: float) -> int:
        n = len(self.x)
        if query <= self.x[0]:
            return 1
        if query >= self.x[n - 1]:
            return n - 1
        # smallest j with query <= x[j]
        i, j = 0, n - 1
        while i + 1 < j:
            k = i + (j - i) // 2
            if query <= self.x[k]:
                j = k
            else:
                i = k
        return j

    def evaluate(self, query: float) -> float:
        if len(self.x) < 2:
            return float("nan")
        return self.segment(self.segment_index(query))(query)

    def __call__(self, queries):
        """Vectorised evaluate: same segment choice, same Horner form."""
        q = np.asarray(queries, dtype=np.float64)
        n = len(self.x)
        if n < 2:
            return np.full(q.shape, np.nan)
        j = np.clip(np.searchsorted(self.x, q, side="left"), 1, n - 1)
        dx = q - self.x[j]
        with np.errstate(invalid="ignore", over="ignore"):
            return self.a[j] + (self.b[j] + (self.c[j] / 2.0 + self.d[j] * dx / 6.0) * dx) * dx

class CubicSpline:
    """
    Holder for the current SplineModel. build() swaps in a new model;
    evaluate() returns NaN until the first build.
    """
    def __init__(self):
        self.model: Optional[SplineModel] = None

    @property
    def is_built(self) -> bool:
        return self.model is not None

    def build(self, x, y, n: Optional[int] = None) -> SplineModel:
        self.model = SplineModel.build(x, y, n)
        return self.model

    def evaluate(self, query: float) -> float:
        model = self.model
        if model is None:
            return float("nan")
        return model.evaluate(query)
