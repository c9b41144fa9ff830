"""
Palettemill Configuration
Manages environment variables and defaults for the palette service.
"""
import os


class Config:
    """Configuration class for Palettemill services."""

    # File size and dimensions
    MAX_FILE_MB: int = int(os.environ.get("PALETTEMILL_MAX_FILE_MB", "10"))
    MAX_EDGE: int = int(os.environ.get("PALETTEMILL_MAX_EDGE", "1024"))

    # Palette defaults
    DEFAULT_COLOR_COUNT: int = int(os.environ.get("PALETTEMILL_DEFAULT_COLOR_COUNT", "10"))
    DEFAULT_QUALITY: int = int(os.environ.get("PALETTEMILL_DEFAULT_QUALITY", "10"))
    MIN_COLOR_COUNT: int = 2
    MAX_COLOR_COUNT: int = 20
    MIN_QUALITY: int = 1
    MAX_QUALITY: int = 10

    # Pixel filtering
    ALPHA_THRESHOLD: int = int(os.environ.get("PALETTEMILL_ALPHA_THRESHOLD", "125"))
    WHITE_THRESHOLD: int = int(os.environ.get("PALETTEMILL_WHITE_THRESHOLD", "250"))

    # Logging
    LOG_LEVEL: str = os.environ.get("PALETTEMILL_LOG_LEVEL", "INFO")

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get("PALETTEMILL_ALLOWED_ORIGINS", "")

    # Observability
    METRICS_ENABLED: bool = bool(int(os.environ.get("PALETTEMILL_METRICS_ENABLED", "1")))

    # Supported image formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png", "image/gif", "image/webp"]
    SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}

    @classmethod
    def validate_color_count(cls, color_count: int) -> bool:
        """Validate requested palette size."""
        return cls.MIN_COLOR_COUNT <= color_count <= cls.MAX_COLOR_COUNT

    @classmethod
    def validate_quality(cls, quality: int) -> bool:
        """Validate sampling stride."""
        return cls.MIN_QUALITY <= quality <= cls.MAX_QUALITY

    @classmethod
    def allowed_origins(cls) -> list:
        """CORS origins as a list; empty means same-origin only."""
        return [origin.strip() for origin in cls.ALLOWED_ORIGINS.split(",") if origin.strip()]


# Global config instance
config = Config()
