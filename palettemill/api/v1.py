"""
Palettemill v1 API Routes
Palette extraction from uploaded images or raw pixels, and nearest-color lookup.
"""
import time
from typing import Optional

import numpy as np
from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from palettemill.config import config
from palettemill.schemas import (
    MetricsResponse, NearestColorRequest, NearestColorResponse, PaletteColor,
    PaletteResponse, PixelPaletteRequest
)
from palettemill.services.colors.extraction import sample_pixels
from palettemill.services.colors.utils import rgb_to_hex, rgb_to_hsl
from palettemill.services.imaging import read_image, resize_long_edge, validate_file_upload
from palettemill.services.quantization import ColorMap, quantize
from palettemill.utils.ids import generate_request_id
from palettemill.utils.logging import get_logger
from palettemill.utils.metrics import get_metrics

router = APIRouter(prefix="/v1", tags=["Palette"])
log = get_logger()


def _palette_colors(cmap: Optional[ColorMap]) -> list:
    """Convert a color map to response entries."""
    if cmap is None:
        return []
    return [
        PaletteColor(
            rgb=list(color),
            hex=rgb_to_hex(color),
            hsl=list(rgb_to_hsl(color)),
            population=population,
            ratio=float(ratio)
        )
        for color, population, ratio in zip(cmap.palette(), cmap.populations(), cmap.ratios())
    ]


def _build_response(pixels: np.ndarray, color_count: int, request_id: str,
                    mode: str, start_time: float) -> PaletteResponse:
    """Quantize pixels and assemble the response, recording metrics."""
    metrics = get_metrics()

    quantize_start = time.time()
    cmap = quantize(pixels, color_count)
    if config.METRICS_ENABLED:
        metrics.record_timing("quantize", (time.time() - quantize_start) * 1000)

    colors = _palette_colors(cmap)
    if not colors:
        log.info("No palette could be produced",
                 extra={"request_id": request_id, "mode": mode, "sampled_pixels": len(pixels)})
        if config.METRICS_ENABLED:
            metrics.increment_empty_count()

    processing_ms = (time.time() - start_time) * 1000
    if config.METRICS_ENABLED:
        metrics.record_timing(f"palette_{mode}", processing_ms)
        metrics.record_palette_size(len(colors))

    log.info(f"Palette complete: {len(colors)} colors",
             extra={"request_id": request_id, "mode": mode, "ms_total": processing_ms})

    return PaletteResponse(
        request_id=request_id,
        color_count=color_count,
        sampled_pixels=len(pixels),
        palette=colors,
        dominant=colors[0] if colors else None,
        processing_ms=processing_ms
    )


@router.post("/palette",
             response_model=PaletteResponse,
             summary="Palette from image",
             description="Extract the dominant colors of an uploaded image. Images whose "
                         "long edge exceeds the configured maximum are downscaled "
                         "(nearest neighbour) before sampling.")
async def palette_from_image(
    file: UploadFile = File(..., description="JPEG, PNG, GIF or WebP image"),
    color_count: int = Query(config.DEFAULT_COLOR_COUNT, description="Number of colors (2-20)"),
    quality: int = Query(config.DEFAULT_QUALITY, description="Sampling stride, 1-10 (1 = every pixel)")
) -> PaletteResponse:
    # Validate parameters
    if not config.validate_color_count(color_count):
        raise HTTPException(status_code=400, detail="Invalid color_count value")
    if not config.validate_quality(quality):
        raise HTTPException(status_code=400, detail="Invalid quality value")

    request_id = generate_request_id("pal")
    start_time = time.time()
    if config.METRICS_ENABLED:
        get_metrics().increment_request_count("upload")

    log.info("Starting palette extraction",
             extra={"request_id": request_id, "filename": file.filename,
                    "color_count": color_count, "quality": quality})

    try:
        validate_file_upload(file)
        image = resize_long_edge(await read_image(file))
    except HTTPException as e:
        if config.METRICS_ENABLED:
            get_metrics().increment_failure_count(f"http_{e.status_code}")
        log.warning(f"Rejected upload: {e.detail}", extra={"request_id": request_id})
        raise

    try:
        pixels = sample_pixels(image, quality=quality,
                               alpha_threshold=config.ALPHA_THRESHOLD,
                               white_threshold=config.WHITE_THRESHOLD)
        return _build_response(pixels, color_count, request_id, "upload", start_time)
    except Exception as e:
        if config.METRICS_ENABLED:
            get_metrics().increment_failure_count("internal")
        log.error(f"Palette extraction failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Palette extraction failed")


@router.post("/palette/pixels",
             response_model=PaletteResponse,
             summary="Palette from pixels",
             description="Quantize caller-supplied RGB samples")
async def palette_from_pixels(body: PixelPaletteRequest) -> PaletteResponse:
    request_id = generate_request_id("pix")
    start_time = time.time()
    if config.METRICS_ENABLED:
        get_metrics().increment_request_count("pixels")

    pixels = np.asarray(body.pixels, dtype=np.uint8).reshape(-1, 3)
    return _build_response(pixels, body.color_count, request_id, "pixels", start_time)


@router.post("/palette/nearest",
             response_model=NearestColorResponse,
             summary="Nearest palette color",
             description="Find the palette entry closest to a color")
async def nearest_color(body: NearestColorRequest) -> NearestColorResponse:
    if config.METRICS_ENABLED:
        get_metrics().increment_request_count("nearest")

    cmap = ColorMap.from_colors(body.palette)
    index = cmap.nearest_index(body.color)
    color = cmap.palette()[index]
    return NearestColorResponse(color=list(color), index=index, hex=rgb_to_hex(color))


@router.get("/metrics", response_model=MetricsResponse, summary="Service metrics")
async def metrics_summary() -> MetricsResponse:
    return MetricsResponse(**get_metrics().get_summary())
