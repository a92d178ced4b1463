"""Application configuration. Loads from environment and .env file."""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
# Load .env from cwd, then backend/.env, then project root .env
load_dotenv()
load_dotenv(BASE_DIR / ".env")
load_dotenv(BASE_DIR.parent / ".env")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes")


# Supported formats
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tiff", ".webp", ".avif"}
IMAGE_OUTPUT_FORMATS = ["webp", "jpeg", "png", "avif"]

# Defaults applied when a submission omits a field (env overrides)
DEFAULT_FORMAT = os.getenv("DEFAULT_FORMAT", "webp").strip().lower()
DEFAULT_TARGET_SIZE_KB = int(os.getenv("DEFAULT_TARGET_SIZE_KB", "300"))
DEFAULT_QUALITY = int(os.getenv("DEFAULT_QUALITY", "80"))
DEFAULT_RESIZE_PERCENT = int(os.getenv("DEFAULT_RESIZE_PERCENT", "100"))
DEFAULT_STRIP_METADATA = _env_bool("DEFAULT_STRIP_METADATA", False)
DEFAULT_RENAME_MODE = os.getenv("DEFAULT_RENAME_MODE", "suffix").strip().lower()
DEFAULT_CUSTOM_PREFIX = os.getenv("DEFAULT_CUSTOM_PREFIX", "")

# Quality search: each pass lowers quality by QUALITY_STEP, never below QUALITY_FLOOR
QUALITY_STEP = int(os.getenv("QUALITY_STEP", "5"))
QUALITY_FLOOR = int(os.getenv("QUALITY_FLOOR", "30"))
if QUALITY_STEP < 1 or not 1 <= QUALITY_FLOOR <= 100:
    raise ValueError(f"QUALITY_STEP must be >= 1 and QUALITY_FLOOR in [1, 100], got {QUALITY_STEP} and {QUALITY_FLOOR}")

# WebP encoder effort (0 fast .. 6 smallest)
ENCODE_EFFORT = int(os.getenv("ENCODE_EFFORT", "4"))

# Name of the zip returned for multi-image batches
ARCHIVE_NAME = os.getenv("ARCHIVE_NAME", "images-optimized.zip")

# Named presets (name -> settings). Values mirror the operator-facing preset buttons.
PRESETS = {
    "website": {
        "label": "Website",
        "format": "webp",
        "target_size_kb": 300,
        "quality": 80,
        "resize_percent": 100,
        "strip_metadata": True,
    },
    "whatsapp": {
        "label": "WhatsApp",
        "format": "jpeg",
        "target_size_kb": 120,
        "quality": 70,
        "resize_percent": 80,
        "strip_metadata": True,
    },
    "catalogue": {
        "label": "Catalogue",
        "format": "jpeg",
        "target_size_kb": 700,
        "quality": 95,
        "resize_percent": 100,
        "strip_metadata": False,
    },
    "linkedin_ad": {
        "label": "LinkedIn Ad",
        "format": "webp",
        "target_size_kb": 500,
        "quality": 85,
        "resize_percent": 100,
        "strip_metadata": True,
    },
    "email": {
        "label": "Email",
        "format": "jpeg",
        "target_size_kb": 180,
        "quality": 75,
        "resize_percent": 70,
        "strip_metadata": True,
    },
    "ppt": {
        "label": "PPT",
        "format": "jpeg",
        "target_size_kb": 300,
        "quality": 85,
        "resize_percent": 85,
        "strip_metadata": False,
    },
}

# Limits (env)
# Images: max count per upload, max size per file (MB)
MAX_IMAGES_PER_UPLOAD = int(os.getenv("MAX_IMAGES_PER_UPLOAD", "50"))
MAX_IMAGE_SIZE_MB = int(os.getenv("MAX_IMAGE_SIZE_MB", "20"))
MAX_IMAGE_SIZE_BYTES = MAX_IMAGE_SIZE_MB * 1024 * 1024

# Server (for uvicorn)
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
# CORS: comma-separated origins, e.g. "http://localhost:3000,http://127.0.0.1:3000"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",") if o.strip()]

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("optimizer")
