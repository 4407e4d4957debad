"""
Volume bar color classification.

Only records with a non-null, non-zero volume become bars. The first bar is
rising; every later bar is falling when the previous *plotted* bar closed
higher than it, rising otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

import numpy as np

from ..data.series import TimeSeries


class VolumeColor(str, Enum):
    RISING = "rising"
    FALLING = "falling"


@dataclass(frozen=True)
class VolumePalette:
    rising: str = "#03a678"
    falling: str = "#c0392b"

    def color_for(self, color: VolumeColor) -> str:
        return self.rising if color is VolumeColor.RISING else self.falling


def classify(series: TimeSeries) -> List[VolumeColor]:
    """One VolumeColor per filtered (volume-bearing) record."""
    closes = series.with_volume().closes
    if closes.size == 0:
        return []
    falling = np.concatenate(([False], closes[:-1] > closes[1:]))
    return [VolumeColor.FALLING if f else VolumeColor.RISING for f in falling]


__all__ = ["VolumeColor", "VolumePalette", "classify"]
