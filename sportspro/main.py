import uvicorn as uvicorn
from fastapi import FastAPI, Request, Depends
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from starlette.exceptions import HTTPException as StarletteHTTPException
import redis.asyncio as redis
import logging

from sportspro.config.settings import settings
from sportspro.config.database import startDB
from sportspro.routes import userRoute, cartRoute

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize database connection and models (startup logic)
    client = await startDB()

    # Initialize rate limiter
    if settings.RATE_LIMITING_ENABLED:
        redis_connection = redis.from_url(settings.REDIS_URL, encoding="utf-8")
        await FastAPILimiter.init(redis_connection)

    yield

    client.close()


app = FastAPI(
    lifespan=lifespan,
    title=settings.PLATFORM_NAME,
    docs_url=None if settings.ENVIRONMENT.lower() == "production" else "/docs",
    redoc_url=None if settings.ENVIRONMENT.lower() == "production" else "/redoc"
)


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler that formats all errors consistently"""
    error_response = {
        "error": {
            "type": exc.__class__.__name__,
            "message": "An error occurred",
            "detail": str(exc),
            "path": request.url.path,
        }
    }

    status_code = 500
    headers = None

    # Handle HTTP exceptions (404, 401, etc.)
    if isinstance(exc, StarletteHTTPException):
        status_code = exc.status_code
        headers = getattr(exc, "headers", None)
        error_response["error"]["message"] = exc.detail
        error_response["error"]["detail"] = exc.detail

    # Handle validation errors
    elif isinstance(exc, RequestValidationError):
        status_code = 422
        error_response["error"]["message"] = "Validation error"
        error_response["error"]["detail"] = jsonable_encoder(exc.errors())

    # Log unexpected errors
    if status_code == 500:
        logger.error(f"Unexpected error: {str(exc)}", exc_info=True)
        error_response["error"]["message"] = "Internal server error"
        # Don't expose internal details in production
        error_response["error"]["detail"] = "Please contact support"

    return JSONResponse(
        status_code=status_code,
        content=error_response,
        headers=headers
    )


app.add_exception_handler(StarletteHTTPException, global_exception_handler)
app.add_exception_handler(RequestValidationError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.client_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def rate_limited(times: int, seconds: int = 60) -> list:
    """Router dependencies enforcing a request budget, when rate limiting is on"""
    if not settings.RATE_LIMITING_ENABLED:
        return []
    return [Depends(RateLimiter(times=times, seconds=seconds))]


app.include_router(userRoute.router, prefix='/api', dependencies=rate_limited(20))
app.include_router(cartRoute.router, tags=['cart'], prefix='/api', dependencies=rate_limited(100))


@app.get("/api/healthchecker", dependencies=rate_limited(100))
def root():
    return {"message": f"Welcome to {settings.PLATFORM_NAME}"}


if __name__ == "__main__":
    uvicorn.run("sportspro.main:app", host="0.0.0.0", port=5001, reload=True, log_level="info")
