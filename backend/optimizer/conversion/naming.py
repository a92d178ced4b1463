"""Output filename policy."""
import re
from datetime import datetime
from typing import Iterable, Optional, Union

from optimizer.conversion.models import OutputFormat, RenameMode

_LAST_EXT = re.compile(r"\.[^/.]+$")


def split_name(name: str) -> tuple[str, str]:
    """(base, ext) with only the last extension removed. ext has no dot and may be empty."""
    m = _LAST_EXT.search(name)
    if not m:
        return name, ""
    return name[: m.start()], m.group(0)[1:]


def timestamp_stamp(now: datetime) -> str:
    return now.strftime("%Y%m%d%H%M")


def build_file_name(
    original_name: str,
    fmt: Union[OutputFormat, str, None],
    mode: Union[RenameMode, str, None],
    custom_prefix: str = "",
    now: Optional[datetime] = None,
) -> str:
    """Name an optimized output.

    The extension is the output format when given, else the source extension,
    else ``webp``. ``timestamp`` mode uses ``now`` (the batch start time) so every
    image in a batch shares one stamp. ``custom`` without a prefix and any unknown
    mode fall back to ``{base}-optimized.{ext}``.
    """
    base, source_ext = split_name(original_name)
    if isinstance(fmt, OutputFormat):
        fmt = fmt.value
    ext = fmt or source_ext or "webp"
    mode = RenameMode.parse(mode.value if isinstance(mode, RenameMode) else mode)

    if mode is RenameMode.ORIGINAL:
        return f"{base}.{ext}"
    if mode is RenameMode.TIMESTAMP:
        stamp = timestamp_stamp(now or datetime.now())
        return f"{stamp}-{base}.{ext}"
    if mode is RenameMode.CUSTOM and custom_prefix:
        return f"{custom_prefix}-{base}.{ext}"
    return f"{base}-optimized.{ext}"


def dedupe_names(names: Iterable[str]) -> list[str]:
    """Make names unique in order: repeats become ``name-2.ext``, ``name-3.ext``...

    The first occurrence keeps its name. Generated names never clash with a
    name that appears later in the sequence.
    """
    names = list(names)
    taken = set(names)
    seen: set[str] = set()
    out: list[str] = []
    for name in names:
        if name not in seen:
            seen.add(name)
            out.append(name)
            continue
        base, ext = split_name(name)
        suffix = f".{ext}" if ext else ""
        n = 2
        while f"{base}-{n}{suffix}" in taken:
            n += 1
        unique = f"{base}-{n}{suffix}"
        taken.add(unique)
        seen.add(unique)
        out.append(unique)
    return out
