"""simsweep.harness.context

Shared context injected into the resolver, the sweep driver and the writer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from simsweep.core.config import HarnessConfig


@dataclass(frozen=True, slots=True)
class HarnessContext:
    config: HarnessConfig
    logger: logging.Logger

    @classmethod
    def default(cls, config: HarnessConfig | None = None) -> HarnessContext:
        return cls(config=config or HarnessConfig(), logger=logging.getLogger("simsweep.harness"))
