"""Percentage-based downscaling."""
import math
from typing import Optional, Tuple


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def scaled_size(
    width: Optional[int],
    height: Optional[int],
    resize_percent: int,
) -> Optional[Tuple[int, Optional[int]]]:
    """
    Target (width, height) for a uniform resize_percent scale, or None when no resize applies.
    - Only percentages strictly between 0 and 100 resize; 100 means keep the original.
    - Without a known width nothing is resized.
    - Without a known height only the width is returned and the aspect ratio decides the rest.
    """
    if not (0 < resize_percent < 100) or not width:
        return None
    factor = resize_percent / 100
    target_w = max(1, _round_half_up(width * factor))
    target_h = max(1, _round_half_up(height * factor)) if height else None
    return (target_w, target_h)
