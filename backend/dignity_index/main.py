import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from dignity_index.api.pages import router as pages_router
from dignity_index.api.v1.dignity import router as dignity_router
from dignity_index.core.config import get_settings
from dignity_index.utils.rate_limit import get_client_ip, rate_limiter

settings = get_settings()

logger = logging.getLogger(__name__)

GENERIC_ERROR_DETAIL = "Internal server error"
RATE_LIMITED_PATHS = ("/", "/api/v1/dignity/analyze")

app = FastAPI(
    title="Dignity Index Evaluator",
    version="1.0.0",
    docs_url="/docs" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.openapi_enabled else None,
)

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )

app.include_router(dignity_router, prefix="/api/v1", tags=["dignity"])
app.include_router(pages_router, tags=["pages"])


@app.exception_handler(StarletteHTTPException)
async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    # 500 details stay hidden unless explicitly enabled; 502 etc. carry user-facing text.
    if exc.status_code == 500 and not get_settings().expose_error_details:
        return JSONResponse(status_code=exc.status_code, content={"detail": GENERIC_ERROR_DETAIL})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):
    # Runs in ServerErrorMiddleware, outside the http middlewares below.
    logger.exception("Unhandled exception")
    detail = str(exc) if get_settings().expose_error_details else GENERIC_ERROR_DETAIL
    return apply_security_headers(JSONResponse(status_code=500, content={"detail": detail}))


@app.middleware("http")
async def analysis_rate_limit_middleware(request: Request, call_next):
    if request.method != "POST" or request.url.path not in RATE_LIMITED_PATHS:
        return await call_next(request)

    settings = get_settings()
    if not settings.rate_limit_api_enabled:
        return await call_next(request)

    ip = get_client_ip(request) or "unknown"
    allowed, _ = rate_limiter.allow(f"analyze:ip:{ip}", settings.rate_limit_api_per_min, 60)
    if not allowed:
        logger.warning("Rate limit hit for %s on %s", ip, request.url.path)
        return JSONResponse(status_code=429, content={"detail": "Too Many Requests"})

    return await call_next(request)


@app.middleware("http")
async def security_headers_middleware(request: Request, call_next):
    return apply_security_headers(await call_next(request))


def apply_security_headers(response: Response) -> Response:
    if not get_settings().security_headers_enabled:
        return response

    headers = response.headers
    if "X-Content-Type-Options" not in headers:
        headers["X-Content-Type-Options"] = "nosniff"
    if "X-Frame-Options" not in headers:
        headers["X-Frame-Options"] = "DENY"
    if "Referrer-Policy" not in headers:
        headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    if "Permissions-Policy" not in headers:
        headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
    if "Content-Security-Policy" not in headers:
        headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"

    return response


@app.get("/health")
async def health_check():
    return {"status": "ok"}
