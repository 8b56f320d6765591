"""simsweep: declarative parameter sweeps over discrete-event simulations.

One text file says which parameters are fixed, which are swept and which are
drawn at random. The harness runs every combination, replicates it with offset
seeds, and streams results into self-describing delimiter-separated files.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "1.0.0"
