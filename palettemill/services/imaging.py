"""
Palettemill Imaging Utilities
Handles upload validation, decoding and downscaling of images.
"""
import io

from fastapi import HTTPException, UploadFile
from PIL import Image

from palettemill.config import config


def validate_file_upload(file: UploadFile) -> None:
    """
    Validate uploaded file for size and format compliance.

    Args:
        file: FastAPI UploadFile object

    Raises:
        HTTPException: 400 for invalid files, 415 for unsupported formats
    """
    # Check file size (file.size might be None for some clients)
    if getattr(file, 'size', None) and file.size > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    # Validate MIME type
    if file.content_type not in config.SUPPORTED_MIME_TYPES:
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )

    # Validate file extension
    if file.filename:
        ext = file.filename.lower().split('.')[-1] if '.' in file.filename else ''
        if f".{ext}" not in config.SUPPORTED_EXTENSIONS:
            raise HTTPException(
                status_code=415,
                detail=f"Unsupported file extension. Supported: {', '.join(sorted(config.SUPPORTED_EXTENSIONS))}"
            )


def validate_magic_bytes(file_bytes: bytes) -> str:
    """
    Validate file magic bytes to ensure it's actually an image.

    Args:
        file_bytes: Raw file bytes

    Returns:
        Detected MIME type

    Raises:
        HTTPException: 400 for invalid/corrupt files
    """
    if len(file_bytes) < 12:
        raise HTTPException(status_code=400, detail="File too small or corrupt")

    if file_bytes.startswith(b'\xff\xd8\xff'):
        return "image/jpeg"
    elif file_bytes.startswith(b'\x89PNG\r\n\x1a\n'):
        return "image/png"
    elif file_bytes.startswith((b'GIF87a', b'GIF89a')):
        return "image/gif"
    elif file_bytes[:4] == b'RIFF' and file_bytes[8:12] == b'WEBP':
        return "image/webp"
    else:
        raise HTTPException(
            status_code=400,
            detail="Invalid image file. Magic bytes don't match supported formats."
        )


def decode_image_bytes(file_bytes: bytes) -> Image.Image:
    """
    Decode raw bytes into an RGBA Pillow image.

    Raises:
        HTTPException: 400 for decode errors
    """
    try:
        pil_image = Image.open(io.BytesIO(file_bytes))
        pil_image.load()
        if pil_image.mode != 'RGBA':
            pil_image = pil_image.convert('RGBA')
    except Exception as e:
        raise HTTPException(
            status_code=400,
            detail=f"Failed to decode image: {str(e)}"
        )
    return pil_image


async def read_image(file: UploadFile) -> Image.Image:
    """
    Safely read and decode an uploaded image.

    Args:
        file: FastAPI UploadFile object

    Returns:
        RGBA Pillow image

    Raises:
        HTTPException: 400 for read or decode errors
    """
    try:
        file_bytes = await file.read()
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Failed to read file: {str(e)}")

    # Validate file size after reading
    if len(file_bytes) > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    validate_magic_bytes(file_bytes)
    return decode_image_bytes(file_bytes)


def resize_long_edge(image: Image.Image, max_edge: int = None) -> Image.Image:
    """
    Resize image so the longest edge is at most max_edge pixels.

    Nearest-neighbour resampling keeps every output pixel an original color.

    Args:
        image: Input Pillow image
        max_edge: Maximum edge size (default from config)

    Returns:
        Resized image (the input itself if already small enough)
    """
    if max_edge is None:
        max_edge = config.MAX_EDGE

    width, height = image.size
    current_max = max(width, height)

    if current_max <= max_edge:
        return image

    scale = max_edge / current_max
    new_size = (max(1, int(width * scale)), max(1, int(height * scale)))
    return image.resize(new_size, Image.NEAREST)
