"""Moving-average smoothing of geodetic fixes."""

from __future__ import annotations

from collections import deque

import numpy as np

from galileo_pvt.models import GeodeticPosition


class MovingAverageFilter:
    """Average the latest ``depth`` geodetic fixes.

    Newest samples sit at the front of each history buffer. Until the buffers
    hold ``depth`` samples the raw fix is passed through and reported invalid.
    A depth of 0 never fills, so every fix stays in warm-up.
    """

    def __init__(self, depth: int = 0) -> None:
        if depth < 0:
            raise ValueError("Averaging depth must be non-negative.")
        self.depth = depth
        self.hist_latitude_deg: deque[float] = deque(maxlen=depth)
        self.hist_longitude_deg: deque[float] = deque(maxlen=depth)
        self.hist_height_m: deque[float] = deque(maxlen=depth)

    def __len__(self) -> int:
        return len(self.hist_latitude_deg)

    @property
    def is_full(self) -> bool:
        return self.depth > 0 and len(self) == self.depth

    def reset(self) -> None:
        self.hist_latitude_deg.clear()
        self.hist_longitude_deg.clear()
        self.hist_height_m.clear()

    def update(self, sample: GeodeticPosition) -> tuple[GeodeticPosition, bool]:
        """Push a fix and return (output position, valid)."""

        if self.depth == 0:
            return sample, False

        if self.is_full:
            self.hist_latitude_deg.pop()
            self.hist_longitude_deg.pop()
            self.hist_height_m.pop()
        self.hist_latitude_deg.appendleft(sample.latitude_deg)
        self.hist_longitude_deg.appendleft(sample.longitude_deg)
        self.hist_height_m.appendleft(sample.height_m)

        if not self.is_full:
            return sample, False

        averaged = GeodeticPosition(
            latitude_deg=float(np.mean(self.hist_latitude_deg)),
            longitude_deg=float(np.mean(self.hist_longitude_deg)),
            height_m=float(np.mean(self.hist_height_m)),
        )
        return averaged, True
