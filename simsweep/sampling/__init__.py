"""simsweep.sampling

Random draws for parameters and for model authors.
"""

from .distributions import (
    NOT_A_NUMBER,
    DistributionCode,
    draw_beta,
    draw_beta_mode,
    draw_gamma,
    draw_range,
    is_nan,
    looks_like_code,
    parse_code,
    sample,
)

__all__ = [
    "NOT_A_NUMBER",
    "DistributionCode",
    "draw_beta",
    "draw_beta_mode",
    "draw_gamma",
    "draw_range",
    "is_nan",
    "looks_like_code",
    "parse_code",
    "sample",
]
