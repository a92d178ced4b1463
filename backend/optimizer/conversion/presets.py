"""Named presets, settings resolution and the auto-settings heuristic."""
from dataclasses import asdict, dataclass
from typing import Any, Iterable, Optional

from optimizer import config
from optimizer.conversion.models import OptimizeSettings, OutputFormat, RenameMode
from optimizer.exceptions import InputError

MIB = 1024 * 1024


@dataclass(frozen=True)
class Preset:
    name: str
    label: str
    format: OutputFormat
    target_size_kb: int
    quality: int
    resize_percent: int
    strip_metadata: bool

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["format"] = self.format.value
        return out


def list_presets() -> list[Preset]:
    return [get_preset(name) for name in config.PRESETS]


def get_preset(name: str) -> Preset:
    key = (name or "").strip().lower()
    values = config.PRESETS.get(key)
    if values is None:
        raise InputError(f"Unknown preset: {name}")
    return Preset(
        name=key,
        label=values["label"],
        format=OutputFormat.parse(values["format"]),
        target_size_kb=values["target_size_kb"],
        quality=values["quality"],
        resize_percent=values["resize_percent"],
        strip_metadata=values["strip_metadata"],
    )


def default_settings() -> OptimizeSettings:
    return OptimizeSettings()


def resolve_settings(
    preset: Optional[str] = None,
    format: Optional[str] = None,
    target_size_kb: Optional[int] = None,
    quality: Optional[int] = None,
    resize_percent: Optional[int] = None,
    strip_metadata: Optional[bool] = None,
    rename_mode: Optional[str] = None,
    custom_prefix: Optional[str] = None,
) -> OptimizeSettings:
    """Build batch settings. Explicit values beat the preset, which beats configured defaults."""
    values: dict[str, Any] = asdict(default_settings())
    if preset:
        p = get_preset(preset)
        values.update(
            format=p.format,
            target_size_kb=p.target_size_kb,
            quality=p.quality,
            resize_percent=p.resize_percent,
            strip_metadata=p.strip_metadata,
        )
    if format:
        values["format"] = OutputFormat.parse(format)
    if target_size_kb is not None:
        values["target_size_kb"] = target_size_kb
    if quality is not None:
        values["quality"] = quality
    if resize_percent is not None:
        values["resize_percent"] = resize_percent
    if strip_metadata is not None:
        values["strip_metadata"] = strip_metadata
    if rename_mode:
        values["rename_mode"] = RenameMode.parse(rename_mode)
    if custom_prefix is not None:
        values["custom_prefix"] = custom_prefix.strip()
    return OptimizeSettings(**values)


def suggest_settings(files: Iterable[dict[str, Any]], current_format: Optional[str] = None) -> dict[str, Any]:
    """Suggest format/target/quality/resize for files about to be submitted.

    files: dicts with ``size`` (bytes) and optionally ``type`` (MIME) and ``name``.
    Any PNG switches the suggestion to webp; the largest file picks the rest.
    """
    files = list(files)
    if not files:
        raise InputError("No files to suggest settings for")
    fmt = OutputFormat.parse(current_format)
    try:
        max_size = max(int(f.get("size") or 0) for f in files)
        any_png = any(
            "png" in str(f.get("type") or "").lower() or str(f.get("name") or "").lower().endswith(".png")
            for f in files
        )
    except (AttributeError, TypeError, ValueError) as e:
        raise InputError(f"Invalid file hint: {e}") from e
    if any_png:
        fmt = OutputFormat.WEBP

    if max_size > 3 * MIB:
        resize_percent, target, quality = 80, 300, 80
    elif max_size > 1 * MIB:
        resize_percent, target, quality = 90, 350, 85
    else:
        resize_percent, target, quality = 100, 250, 80
    return {
        "format": fmt.value,
        "target_size_kb": target,
        "quality": quality,
        "resize_percent": resize_percent,
    }
