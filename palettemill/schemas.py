"""
Palettemill API Schemas
Pydantic models for palette request/response validation.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, conint, conlist

from palettemill.config import config

Channel = conint(ge=0, le=255)
RGBTriple = conlist(Channel, min_length=3, max_length=3)


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("palettemill", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


# ============================================================================
# PALETTE SCHEMAS
# ============================================================================

class PaletteColor(BaseModel):
    """Single palette color with its share of the sampled pixels."""
    rgb: List[int] = Field(..., min_length=3, max_length=3, description="[R, G, B] 0-255")
    hex: str = Field(
        ...,
        pattern=r"^#[0-9A-Fa-f]{6}$",
        description="Hex color code in format #RRGGBB"
    )
    hsl: List[int] = Field(..., min_length=3, max_length=3, description="[H deg, S %, L %]")
    population: int = Field(..., ge=0, description="Sampled pixels represented by this color")
    ratio: float = Field(..., ge=0.0, le=1.0, description="Share of sampled pixels (0.0-1.0)")


class PaletteResponse(BaseModel):
    """Palette extraction response. An empty palette means no usable pixels."""
    request_id: str = Field(..., description="Request identifier")
    color_count: int = Field(..., description="Requested palette size after clamping")
    sampled_pixels: int = Field(..., ge=0, description="Pixels fed to the quantizer")
    palette: List[PaletteColor] = Field(default_factory=list, description="Most dominant first")
    dominant: Optional[PaletteColor] = Field(None, description="First palette entry, if any")
    processing_ms: float = Field(..., ge=0.0, description="Server-side processing time")


class PixelPaletteRequest(BaseModel):
    """Palette extraction from raw pixel samples."""
    pixels: List[RGBTriple] = Field(..., description="RGB triples, already filtered by the caller")
    color_count: int = Field(config.DEFAULT_COLOR_COUNT, ge=config.MIN_COLOR_COUNT,
                             le=config.MAX_COLOR_COUNT, description="Number of colors to extract")


class NearestColorRequest(BaseModel):
    """Nearest palette color lookup."""
    palette: List[RGBTriple] = Field(..., min_length=1, description="Palette to search, in priority order")
    color: RGBTriple = Field(..., description="Color to match")


class NearestColorResponse(BaseModel):
    """Nearest palette color lookup result."""
    color: List[int] = Field(..., description="Closest palette color")
    index: int = Field(..., ge=0, description="Index of the closest color in the palette")
    hex: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$")


class MetricsResponse(BaseModel):
    """In-process metrics summary."""
    uptime_seconds: float
    counters: Dict[str, int]
    timing_stats: Dict[str, Dict[str, float]]
    palette_size_stats: Dict[str, Any]
