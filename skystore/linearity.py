"""Measure how far timings drift from a baseline as client counts grow."""

from __future__ import annotations

import math
from dataclasses import dataclass, field


@dataclass
class LinearityMeter:
    """Track the percentage change of successive timings against the first one.

    The first timing given to :meth:`get_delta` becomes the baseline. Every
    later timing is compared with it, and the change is recorded in
    ``measure``.
    """

    init: int | None = None
    measure: list[float] = field(default_factory=list)

    def get_delta(self, current: int) -> float:
        """Return the percentage change of ``current`` from the baseline.

        The first call sets the baseline and returns 0.0 without recording it.
        """
        if self.init is None:
            self.init = current
            return 0.0
        base = self.init
        difference = current - base
        if base == 0:
            if difference == 0:
                delta = math.nan
            else:
                delta = math.copysign(math.inf, difference)
        else:
            delta = (difference / base) * 100.0
        self.measure.append(delta)
        return delta