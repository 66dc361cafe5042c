from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from listing_writer.api.forms import router as forms_router
from listing_writer.api.generate import router as generate_router
from listing_writer.api.vehicles import router as vehicles_router
from listing_writer.config import settings
from listing_writer.errors import (
    ConfigurationError,
    GenerationError,
    ListingError,
    ServiceLookupError,
    ValidationError,
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

if not settings.openrouter_api_key:
    logger.warning("OPENROUTER_API_KEY is not set; description generation is disabled")

app = FastAPI(
    title="Car Listing Writer API",
    description="VIN decode, make/model lookups and AI-written sales descriptions",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_STATUS = {
    ValidationError: 422,
    ServiceLookupError: 502,
    ConfigurationError: 503,
    GenerationError: 502,
}


@app.exception_handler(ListingError)
async def listing_error_handler(request: Request, exc: ListingError):
    status_code = ERROR_STATUS.get(type(exc), 400)
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


app.include_router(vehicles_router, prefix="/api/vehicles", tags=["Vehicles"])
app.include_router(generate_router, prefix="/api", tags=["Generation"])
app.include_router(forms_router, prefix="/api", tags=["Forms"])


@app.get("/")
async def root():
    return {
        "service": "Car Listing Writer API",
        "status": "online",
        "version": "1.0.0",
        "generation_configured": bool(settings.openrouter_api_key),
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}
