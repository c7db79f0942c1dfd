"""
Sora Prompt Genie Web API - Main FastAPI Application

Backend glue for the prompt builder:
- LLM integration (OpenRouter, optional Langflow) for prompt merging,
  suggestions, auto-authoring and restructuring
- Static enhancement catalog
- Per-IP rate limiting and security headers
"""

import sys
from pathlib import Path
from contextlib import asynccontextmanager

# Add parent directory to path to import existing modules
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from utils.logger import logger
from web_ui.api.utils.error_formatter import format_error_response


def validate_environment() -> bool:
    """Log missing configuration. Returns False if a required variable is unset."""
    missing = settings.missing_required()
    for entry in missing:
        logger.error(f"Missing required environment variable: {entry}")

    for entry in settings.missing_recommended():
        logger.warning(f"Missing recommended environment variable: {entry}")

    if missing:
        logger.error("AI endpoints will fail until the required variables are set")
        return False
    logger.info("Environment variables validated successfully")
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events"""
    validate_environment()
    logger.info("=" * 50)
    logger.info("  Sora Prompt Genie API")
    logger.info(f"  → http://{settings.HOST}:{settings.PORT} ({settings.ENVIRONMENT})")
    logger.info(f"  → API Docs: http://{settings.HOST}:{settings.PORT}/docs")
    logger.info("=" * 50)
    yield
    logger.info("Sora Prompt Genie API shutting down...")


app = FastAPI(
    title="Sora Prompt Genie API",
    description="Cinematic prompt builder for AI video generation",
    version="1.0.0",
    lifespan=lifespan,
    redirect_slashes=False,
)

# Middleware is added innermost first; CORS ends up outermost so that even
# 429 responses carry CORS headers.
from web_ui.api.middleware.rate_limit import RateLimitMiddleware
app.add_middleware(RateLimitMiddleware)

from web_ui.api.middleware.request_logging import RequestLoggingMiddleware
app.add_middleware(RequestLoggingMiddleware)

from web_ui.api.middleware.security_headers import SecurityHeadersMiddleware
app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=[
        "RateLimit-Limit",
        "RateLimit-Remaining",
        "RateLimit-Reset",
        "Retry-After",
    ],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Bad request bodies get 400 with the first validation message"""
    errors = exc.errors()
    message = "Validation failed"
    if errors:
        message = str(errors[0].get("msg") or message)
        # Custom validators surface as "Value error, <message>"
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
    logger.warning(f"Validation error in {request.url.path}: {errors}")
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=500, content=format_error_response(exc, f"Unhandled error in {request.url.path}"))


# Import and include routers
from web_ui.api.routes import prompts
from web_ui.api.schemas.prompt_schemas import ErrorResponse

app.include_router(
    prompts.router,
    prefix="/api",
    tags=["Prompts"],
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "name": "Sora Prompt Genie API",
        "version": "1.0.0",
        "description": "Cinematic prompt builder for AI video generation",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("web_ui.api.main:app", host=settings.HOST, port=settings.PORT, reload=settings.is_development)
