"""simsweep.sampling.distributions

Coded random distributions.

A code is `<Letter>(<args>)`:
- U(lo,hi)          uniform in [lo, hi)
- N(mean,sd)        normal
- C(k)              uniform integer in [0, k)
- G(mean,sd[,min])  Gamma normalised to mean 1, rescaled to mean and shifted by min

`sample` never raises on bad input. It returns NOT_A_NUMBER so callers can tell
"not a random parameter" from a value. Deciding what to do about it is theirs.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

import numpy as np

NOT_A_NUMBER = float("nan")

# C(k) keeps k as a float; past 2**53 it is no longer exact (and soon exceeds int64)
_C_MAX = 2**53

_CODE_RE = re.compile(r"^([A-Za-z])\((.*)\)$")

# letter -> (min args, max args)
_ARITY: dict[str, tuple[int, int]] = {
    "U": (2, 2),
    "N": (2, 2),
    "C": (1, 1),
    "G": (2, 3),
}


@dataclass(frozen=True, slots=True)
class DistributionCode:
    kind: str  # U | N | C | G
    args: tuple[float, ...]

    def draw(self, rng: np.random.Generator) -> float:
        a = self.args
        if self.kind == "U":
            return float(rng.random() * (a[1] - a[0]) + a[0])
        if self.kind == "N":
            return float(rng.standard_normal() * a[1] + a[0])
        if self.kind == "C":
            return float(rng.integers(int(a[0])))
        if self.kind == "G":
            lo = a[2] if len(a) > 2 else 0.0
            return draw_gamma(rng, a[0], a[1], lo)
        raise ValueError(f"unknown distribution kind: {self.kind}")


def is_nan(value: float) -> bool:
    return isinstance(value, float) and math.isnan(value)


def parse_code(code: str) -> DistributionCode | None:
    """Parse a code without drawing. None when it is not a valid code."""

    compact = "".join(str(code).split())
    m = _CODE_RE.match(compact)
    if m is None:
        return None

    kind, body = m.group(1), m.group(2)
    arity = _ARITY.get(kind)
    if arity is None:
        return None

    parts = body.split(",")
    if not (arity[0] <= len(parts) <= arity[1]):
        return None

    if kind == "C":
        try:
            k = int(parts[0])
        except ValueError:
            return None
        if k <= 0 or k > _C_MAX:
            return None
        return DistributionCode(kind=kind, args=(float(k),))

    args: list[float] = []
    for p in parts:
        try:
            v = float(p)
        except ValueError:
            return None
        if not math.isfinite(v):
            return None
        args.append(v)
    return DistributionCode(kind=kind, args=tuple(args))


def sample(code: str, rng: np.random.Generator) -> float:
    """Draw once from `code`. NOT_A_NUMBER if the code is malformed."""

    dist = parse_code(code)
    if dist is None:
        return NOT_A_NUMBER
    return dist.draw(rng)


def draw_gamma_normalized(rng: np.random.Generator, sd: float) -> float:
    """Gamma deviate with mean 1 and standard deviation `sd`.

    shape = rate = 1/sd^2 gives mean shape/rate = 1 and variance shape/rate^2 = sd^2.
    sd == 0 is the degenerate case: the deviate is exactly 1. So is an sd whose
    square underflows. An sd whose square overflows has no usable shape and
    gives NOT_A_NUMBER.
    """

    if sd == 0:
        return 1.0
    var = sd * sd
    if not math.isfinite(var):
        return NOT_A_NUMBER
    shape = 1.0 / var if var > 0 else math.inf
    if not math.isfinite(shape):
        return 1.0
    return float(rng.gamma(shape, 1.0 / shape))


def draw_gamma(rng: np.random.Generator, mean: float, sd: float, lo: float = 0.0) -> float:
    return draw_gamma_normalized(rng, sd) * (mean - lo) + lo


def draw_range(rng: np.random.Generator, value: float, var: float, lo: float, hi: float) -> float:
    """Normal perturbation of `value`, redrawn until it lands in [lo, hi].

    Rejection sampling: keep `var` small relative to the range or this spins.
    """

    if var <= 0:
        if lo <= value <= hi:
            return float(value)
        raise ValueError(f"{value} is outside [{lo}, {hi}] and var={var} cannot move it")

    while True:
        draw = rng.standard_normal() * var
        if lo <= value + draw <= hi:
            return float(value + draw)


def draw_beta(rng: np.random.Generator, mean: float, var: float) -> float:
    """Beta deviate from a mean and an inverse-root sample size in (0, 1)."""

    if var < 1e-4:
        return float(mean)
    mean = min(max(mean, 1e-4), 1 - 1e-4)
    a = mean / var**2
    b = (1 - mean) / var**2
    return float(rng.beta(a, b))


def draw_beta_mode(rng: np.random.Generator, mode: float, concentration: float) -> float:
    """Beta deviate peaked at `mode`; larger `concentration` narrows it."""

    a = mode * (500 * concentration) + 1
    b = (1 - mode) * (500 * concentration) + 1
    return float(rng.beta(a, b))


def looks_like_code(value: str) -> bool:
    """Shaped like `<Letter>(...)`, whether or not it parses."""

    return _CODE_RE.match("".join(str(value).split())) is not None
