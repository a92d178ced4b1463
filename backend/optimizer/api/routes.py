"""API routes for batch image optimization."""
import asyncio
import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Body, File, Form, HTTPException, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel

from optimizer.config import (
    ARCHIVE_NAME,
    IMAGE_EXTENSIONS,
    IMAGE_OUTPUT_FORMATS,
    MAX_IMAGE_SIZE_BYTES,
    MAX_IMAGES_PER_UPLOAD,
    QUALITY_FLOOR,
    QUALITY_STEP,
)
from optimizer.conversion.presets import list_presets, resolve_settings, suggest_settings
from optimizer.conversion.service import get_optimizer_service
from optimizer.exceptions import InputError

logger = logging.getLogger("optimizer.api")
router = APIRouter(prefix="/api", tags=["optimizer"])

INTERNAL_ERROR_MESSAGE = "Internal error while optimizing images"
SAVINGS_HEADERS = ["Content-Disposition", "X-Original-Bytes", "X-Optimized-Bytes", "X-Image-Count"]


class FileHint(BaseModel):
    """What the client knows about a file before uploading it."""

    name: str = ""
    size: int = 0
    type: str = ""


def _safe_upload_name(name: Optional[str]) -> str:
    """Base name of a client-supplied filename (no directories, never empty)."""
    base = (name or "").replace("\\", "/").rsplit("/", 1)[-1].strip()
    return base or "image"


def _content_disposition(filename: str) -> str:
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


async def _read_upload(file: UploadFile, name: str) -> bytes:
    """Read an upload into memory in 1 MB chunks, enforcing the per-image size limit."""
    max_mb = MAX_IMAGE_SIZE_BYTES // (1024 * 1024)
    chunks = bytearray()
    while chunk := await file.read(1024 * 1024):
        chunks.extend(chunk)
        if len(chunks) > MAX_IMAGE_SIZE_BYTES:
            raise HTTPException(413, f"File too large: {name} (max {max_mb} MB)")
    return bytes(chunks)


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/limits")
def get_limits():
    """Return upload limits and quality-search bounds for the client."""
    return {
        "max_images_per_upload": MAX_IMAGES_PER_UPLOAD,
        "max_image_size_mb": MAX_IMAGE_SIZE_BYTES // (1024 * 1024),
        "max_image_size_bytes": MAX_IMAGE_SIZE_BYTES,
        "quality_step": QUALITY_STEP,
        "quality_floor": QUALITY_FLOOR,
    }


@router.get("/formats")
def get_formats():
    return {
        "image": sorted(IMAGE_EXTENSIONS),
        "output_image": IMAGE_OUTPUT_FORMATS,
    }


@router.get("/presets")
def get_presets():
    """Named presets (name -> format, target size, quality, resize, metadata policy)."""
    return {p.name: p.to_dict() for p in list_presets()}


@router.post("/auto-settings")
def auto_settings(
    files: list[FileHint] = Body(..., embed=True),
    format: Optional[str] = Body(None, embed=True),
):
    """Suggest settings for files the operator is about to submit ({name, size, type} each)."""
    try:
        return suggest_settings([f.model_dump() for f in files], current_format=format)
    except InputError as e:
        raise HTTPException(400, e.message)


@router.post("/optimize")
async def optimize_images(
    images: Optional[list[UploadFile]] = File(None),
    output_format: Optional[str] = Form(None, alias="format"),
    target_size_kb: Optional[int] = Form(None, alias="targetSizeKB", ge=0),
    quality: Optional[int] = Form(None, ge=1, le=100),
    resize_percent: Optional[int] = Form(None, alias="resizePercent", gt=0, le=100),
    strip_metadata: Optional[bool] = Form(None, alias="stripMetadata"),
    rename_mode: Optional[str] = Form(None, alias="renameMode"),
    custom_prefix: Optional[str] = Form(None, alias="customPrefix"),
    preset: Optional[str] = Form(None),
):
    """Optimize a batch. One image comes back as itself, several as a zip."""
    uploads = [f for f in (images or []) if f.filename]
    if not uploads:
        raise HTTPException(400, "No images provided")
    if len(uploads) > MAX_IMAGES_PER_UPLOAD:
        raise HTTPException(400, f"Max {MAX_IMAGES_PER_UPLOAD} images per upload")

    try:
        settings = resolve_settings(
            preset=preset,
            format=output_format,
            target_size_kb=target_size_kb,
            quality=quality,
            resize_percent=resize_percent,
            strip_metadata=strip_metadata,
            rename_mode=rename_mode,
            custom_prefix=custom_prefix,
        )
    except InputError as e:
        raise HTTPException(400, e.message)

    files: list[tuple[str, bytes]] = []
    for upload in uploads:
        name = _safe_upload_name(upload.filename)
        files.append((name, await _read_upload(upload, name)))

    svc = get_optimizer_service()
    try:
        payload = await asyncio.to_thread(svc.optimize, files, settings, ARCHIVE_NAME)
    except InputError as e:
        raise HTTPException(400, e.message)
    except Exception as e:
        logger.exception("Batch optimization failed: %s", e)
        raise HTTPException(500, INTERNAL_ERROR_MESSAGE)

    return Response(
        content=payload.body,
        media_type=payload.content_type,
        headers={
            "Content-Disposition": _content_disposition(payload.filename),
            "X-Original-Bytes": str(payload.original_bytes),
            "X-Optimized-Bytes": str(payload.optimized_bytes),
            "X-Image-Count": str(payload.file_count),
        },
    )
