"""Optimization request/response models."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from optimizer import config
from optimizer.exceptions import InputError


class OutputFormat(str, Enum):
    WEBP = "webp"
    JPEG = "jpeg"
    PNG = "png"
    AVIF = "avif"

    @classmethod
    def parse(cls, value: Optional[str]) -> "OutputFormat":
        """Parse a user-supplied format. Empty means webp; ``jpg`` is an alias of jpeg."""
        name = (value or "").strip().lower()
        if not name:
            return cls.WEBP
        if name == "jpg":
            return cls.JPEG
        try:
            return cls(name)
        except ValueError:
            raise InputError(f"Unsupported output format: {value}") from None

    @property
    def content_type(self) -> str:
        return f"image/{self.value}"

    @property
    def is_lossless(self) -> bool:
        return self is OutputFormat.PNG


class RenameMode(str, Enum):
    ORIGINAL = "original"
    SUFFIX = "suffix"
    TIMESTAMP = "timestamp"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: Optional[str]) -> "RenameMode":
        """Unknown or empty modes fall back to suffix naming."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.SUFFIX


@dataclass(frozen=True)
class OptimizeSettings:
    """Configuration shared by every image in one batch. Defaults come from config."""

    format: OutputFormat = OutputFormat.parse(config.DEFAULT_FORMAT)
    target_size_kb: int = config.DEFAULT_TARGET_SIZE_KB
    quality: int = config.DEFAULT_QUALITY
    resize_percent: int = config.DEFAULT_RESIZE_PERCENT
    strip_metadata: bool = config.DEFAULT_STRIP_METADATA
    rename_mode: RenameMode = RenameMode.parse(config.DEFAULT_RENAME_MODE)
    custom_prefix: str = config.DEFAULT_CUSTOM_PREFIX

    def __post_init__(self):
        if not 1 <= self.quality <= 100:
            raise InputError(f"quality must be between 1 and 100, got {self.quality}")
        if not 0 < self.resize_percent <= 100:
            raise InputError(f"resize_percent must be in (0, 100], got {self.resize_percent}")
        if self.target_size_kb < 0:
            raise InputError(f"target_size_kb must be >= 0, got {self.target_size_kb}")


@dataclass(frozen=True)
class EncodeRequest:
    """One image plus the settings it is encoded with."""

    source_bytes: bytes
    original_name: str
    format: OutputFormat = OutputFormat.parse(config.DEFAULT_FORMAT)
    target_size_kb: int = config.DEFAULT_TARGET_SIZE_KB
    base_quality: int = config.DEFAULT_QUALITY
    resize_percent: int = config.DEFAULT_RESIZE_PERCENT
    strip_metadata: bool = config.DEFAULT_STRIP_METADATA
    rename_mode: RenameMode = RenameMode.parse(config.DEFAULT_RENAME_MODE)
    custom_prefix: str = config.DEFAULT_CUSTOM_PREFIX

    @classmethod
    def build(cls, original_name: str, source_bytes: bytes, settings: OptimizeSettings) -> "EncodeRequest":
        return cls(
            source_bytes=source_bytes,
            original_name=original_name,
            format=settings.format,
            target_size_kb=settings.target_size_kb,
            base_quality=settings.quality,
            resize_percent=settings.resize_percent,
            strip_metadata=settings.strip_metadata,
            rename_mode=settings.rename_mode,
            custom_prefix=settings.custom_prefix,
        )


@dataclass(frozen=True)
class EncodeResult:
    filename: str
    data: bytes
    quality: int
    passes: int
    width: int
    height: int

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class BatchResult:
    results: list[EncodeResult] = field(default_factory=list)
    total_original_bytes: int = 0

    @property
    def total_optimized_bytes(self) -> int:
        return sum(r.size for r in self.results)

    def __len__(self) -> int:
        return len(self.results)


@dataclass(frozen=True)
class OptimizedPayload:
    """What the HTTP layer sends back: one image or one zip."""

    content_type: str
    filename: str
    body: bytes
    file_count: int
    original_bytes: int
    optimized_bytes: int
