"""In-memory zip packing for multi-image responses."""
import io
import logging
import zipfile
from typing import Iterable

logger = logging.getLogger("optimizer.archive")


def pack_archive(entries: Iterable[tuple[str, bytes]]) -> bytes:
    """Zip (name, data) pairs into one buffer, in order. Entry names must already be unique."""
    buf = io.BytesIO()
    count = 0
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries:
            zf.writestr(name, data)
            count += 1
    data = buf.getvalue()
    logger.info("Packed %s entries into zip (%s bytes)", count, len(data))
    return data
