from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from palettemill import __version__
from palettemill.api.v1 import router as v1_router
from palettemill.config import config
from palettemill.schemas import HealthResponse
from palettemill.utils.logging import get_logger

log = get_logger()

app = FastAPI(
    title="Palettemill",
    description="Dominant color and palette extraction using modified median cut",
    version=__version__
)

if config.allowed_origins():
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"]
    )

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Health check endpoint"""
    return HealthResponse(ok=True, version=__version__, service="palettemill")


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Palettemill API",
        "version": __version__,
        "docs": "/docs"
    }


log.info("Palettemill API initialised", extra={"version": __version__})
