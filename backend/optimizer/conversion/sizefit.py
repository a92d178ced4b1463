"""Quality search that fits an encoded image under a byte budget.

Encoding starts at the requested quality and steps down by a fixed amount until
the output fits or the quality floor is reached. The number of encode passes is
therefore bounded by ``1 + ceil((base_quality - floor) / step)`` whatever the
image looks like. Encoded size is not strictly monotonic in quality for every
codec, so this is a greedy descent rather than a bisection.
"""
import logging
from dataclasses import dataclass
from typing import Callable

from optimizer.config import QUALITY_FLOOR, QUALITY_STEP
from optimizer.conversion import codec
from optimizer.conversion.codec import DecodedImage
from optimizer.conversion.models import OutputFormat

logger = logging.getLogger("optimizer.sizefit")

Encoder = Callable[[DecodedImage, OutputFormat, int, bool], bytes]


@dataclass(frozen=True)
class FitOutcome:
    data: bytes
    quality: int
    passes: int

    @property
    def size_kb(self) -> float:
        return len(self.data) / 1024


def fit(
    image: DecodedImage,
    fmt: OutputFormat,
    base_quality: int,
    target_size_kb: int,
    keep_metadata: bool = False,
    encoder: Encoder = codec.encode,
    step: int = QUALITY_STEP,
    floor: int = QUALITY_FLOOR,
) -> FitOutcome:
    """Encode ``image`` as small as needed to fit ``target_size_kb``.

    A target of 0 (or less) disables fitting: one encode at ``base_quality``.
    The last buffer is returned even when the target could not be reached.
    Quality never drops below ``floor``; PNG ignores quality so its loop simply
    runs down to the floor.
    """
    if step < 1:
        raise ValueError(f"step must be >= 1, got {step}")
    quality = base_quality
    data = encoder(image, fmt, quality, keep_metadata)
    passes = 1
    if target_size_kb <= 0:
        return FitOutcome(data=data, quality=quality, passes=passes)

    while len(data) / 1024 > target_size_kb and quality > floor:
        quality = max(floor, quality - step)
        data = encoder(image, fmt, quality, keep_metadata)
        passes += 1

    if len(data) / 1024 > target_size_kb:
        logger.info(
            "Target %s KB not reached for %s (%.1f KB at quality %s)",
            target_size_kb, fmt.value, len(data) / 1024, quality,
        )
    return FitOutcome(data=data, quality=quality, passes=passes)
