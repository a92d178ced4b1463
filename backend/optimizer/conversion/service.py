"""Batch optimization: resize, metadata policy, size-fit encode, rename, then one file or a zip."""
import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Sequence

from optimizer.archive import pack_archive
from optimizer.config import ARCHIVE_NAME, QUALITY_FLOOR, QUALITY_STEP
from optimizer.conversion import codec
from optimizer.conversion.models import (
    BatchResult,
    EncodeRequest,
    EncodeResult,
    OptimizedPayload,
    OptimizeSettings,
    OutputFormat,
)
from optimizer.conversion.naming import build_file_name, dedupe_names
from optimizer.conversion.resize import scaled_size
from optimizer.conversion.sizefit import fit
from optimizer.exceptions import CodecError, InputError

logger = logging.getLogger("optimizer.service")


class OptimizerService:
    """Runs one batch at a time, strictly in submission order.

    Any image that fails to decode or encode aborts the whole batch; there is
    no partial result.
    """

    def __init__(
        self,
        decoder: Callable = codec.decode,
        resizer: Callable = codec.resize,
        encoder: Callable = codec.encode,
        packer: Callable = pack_archive,
        quality_step: int = QUALITY_STEP,
        quality_floor: int = QUALITY_FLOOR,
        clock: Callable[[], datetime] = datetime.now,
    ):
        if quality_step < 1:
            raise ValueError(f"quality_step must be >= 1, got {quality_step}")
        if not 1 <= quality_floor <= 100:
            raise ValueError(f"quality_floor must be in [1, 100], got {quality_floor}")
        self._decode = decoder
        self._resize = resizer
        self._encode = encoder
        self._pack = packer
        self.quality_step = quality_step
        self.quality_floor = quality_floor
        self._clock = clock
        logger.info("OptimizerService initialized (step=%s, floor=%s)", quality_step, quality_floor)

    def _process_one(self, req: EncodeRequest, now: datetime) -> EncodeResult:
        try:
            image = self._decode(req.source_bytes)
            target = scaled_size(image.width, image.height, req.resize_percent)
            if target:
                image = self._resize(image, target[0], target[1])
            outcome = fit(
                image,
                req.format,
                req.base_quality,
                req.target_size_kb,
                keep_metadata=not req.strip_metadata,
                encoder=self._encode,
                step=self.quality_step,
                floor=self.quality_floor,
            )
        except CodecError as e:
            e.filename = req.original_name
            logger.exception("Optimization failed for %s: %s", req.original_name, e)
            raise

        filename = build_file_name(req.original_name, req.format, req.rename_mode, req.custom_prefix, now=now)
        logger.info(
            "Optimized %s -> %s (%s -> %s bytes, q=%s, passes=%s)",
            req.original_name, filename, len(req.source_bytes), len(outcome.data),
            outcome.quality, outcome.passes,
        )
        return EncodeResult(
            filename=filename,
            data=outcome.data,
            quality=outcome.quality,
            passes=outcome.passes,
            width=image.width,
            height=image.height,
        )

    def process(self, requests: Sequence[EncodeRequest]) -> BatchResult:
        """Optimize every request in order. Raises InputError for an empty batch."""
        if not requests:
            raise InputError("No images provided")
        # one stamp for the whole batch so timestamp names agree
        now = self._clock()
        batch = BatchResult()
        for req in requests:
            batch.total_original_bytes += len(req.source_bytes)
            batch.results.append(self._process_one(req, now))

        unique = dedupe_names(r.filename for r in batch.results)
        for i, (result, name) in enumerate(zip(batch.results, unique)):
            if result.filename != name:
                logger.info("Renamed duplicate output %s -> %s", result.filename, name)
                batch.results[i] = replace(result, filename=name)

        logger.info(
            "Batch of %s done: %s -> %s bytes",
            len(batch), batch.total_original_bytes, batch.total_optimized_bytes,
        )
        return batch

    def shape_response(
        self,
        batch: BatchResult,
        fmt: OutputFormat,
        archive_name: str = ARCHIVE_NAME,
    ) -> OptimizedPayload:
        """One result goes out as the image itself; more are zipped under archive_name."""
        if not batch.results:
            raise InputError("No images provided")
        if len(batch) == 1:
            only = batch.results[0]
            return OptimizedPayload(
                content_type=fmt.content_type,
                filename=only.filename,
                body=only.data,
                file_count=1,
                original_bytes=batch.total_original_bytes,
                optimized_bytes=only.size,
            )
        body = self._pack([(r.filename, r.data) for r in batch.results])
        return OptimizedPayload(
            content_type="application/zip",
            filename=archive_name,
            body=body,
            file_count=len(batch),
            original_bytes=batch.total_original_bytes,
            optimized_bytes=batch.total_optimized_bytes,
        )

    def optimize(
        self,
        files: Sequence[tuple[str, bytes]],
        settings: OptimizeSettings,
        archive_name: Optional[str] = None,
    ) -> OptimizedPayload:
        """Named uploads + shared settings -> the response payload."""
        requests = [EncodeRequest.build(name, data, settings) for name, data in files]
        batch = self.process(requests)
        return self.shape_response(batch, settings.format, archive_name or ARCHIVE_NAME)


# Singleton
_optimizer_service: Optional[OptimizerService] = None


def get_optimizer_service() -> OptimizerService:
    global _optimizer_service
    if _optimizer_service is None:
        _optimizer_service = OptimizerService()
    return _optimizer_service
