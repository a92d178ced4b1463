"""Error types raised by the optimizer core.

``InputError`` means the caller sent something unusable and maps to a client error.
``CodecError`` means an image could not be decoded or encoded and aborts the batch.
"""
from collections.abc import Callable
from functools import wraps
from typing import Optional, TypeVar

from PIL import Image, UnidentifiedImageError

T = TypeVar("T")


class OptimizerError(Exception):
    """Base class for optimizer errors."""

    def __init__(self, message: str, filename: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.filename = filename


class InputError(OptimizerError):
    """Rejected submission: no images, invalid setting or unknown preset."""


class CodecError(OptimizerError):
    """An image could not be decoded or encoded."""


def wrap_codec_errors(operation: str):
    """Re-raise Pillow failures inside ``func`` as :class:`CodecError`."""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except CodecError:
                raise
            except UnidentifiedImageError as e:
                raise CodecError(f"{operation}: unrecognised image data") from e
            except Image.DecompressionBombError as e:
                raise CodecError(f"{operation}: image too large") from e
            except KeyError as e:
                # Pillow raises KeyError for a save format it has no plugin for
                raise CodecError(f"{operation}: unsupported format {e}") from e
            except (OSError, ValueError) as e:
                raise CodecError(f"{operation}: {e}") from e

        return wrapper

    return decorator
