import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from . import __version__
from .config import CORS_ORIGINS, LOG_LEVEL, POSTCODES_API_URL, RATE_LIMIT_DEFAULT
from .routers import gridref, postcodes
from .schemas import HealthOut

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Rate limiter
limiter = Limiter(key_func=get_remote_address, default_limits=[RATE_LIMIT_DEFAULT])

app = FastAPI(
    title="NGR Lookup API",
    description="UK postcode to Ordnance Survey National Grid Reference and WGS84 coordinates.",
    version=__version__,
)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(postcodes.router, prefix="/api/v1")
app.include_router(gridref.router, prefix="/api/v1")


@app.get("/health", response_model=HealthOut)
def health_check():
    """Liveness only; does not call the postcode service."""
    return HealthOut(status="ok", version=app.version, postcodes_api=POSTCODES_API_URL)


@app.get("/")
def root():
    return {
        "message": "NGR Lookup API",
        "docs": "/docs",
    }
