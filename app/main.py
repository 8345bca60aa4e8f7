# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# The LearnConnect API: security headers, error mapping and the routers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main          (host and port from API_HOST / API_PORT)
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.exceptions import LearnConnectException, learnconnect_exception_handler
from app.routers import academics, admin, content, contributors, health, marketplace, progress, tasks
from app.auth import routes as auth_routes
from core.services.marketplace_service import MarketplaceService
from lib.supabase_client import SupabaseClientError

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Pages that need a signed-in user; crawlers are told not to index them
PROTECTED_PREFIXES = tuple(
    f"{API_PREFIX}{path}"
    for path in (
        "/marketplace",
        "/admin",
        "/contributors",
        "/auth/me",
        "/content",
        "/progress",
        "/academics",
    )
)

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "origin-when-cross-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the configuration and warm the marketplace cache before serving."""
    logger.info(f"Starting LearnConnect API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.sheets_enabled:
        logger.info("Google Sheets not configured, serving the static content catalog")

    try:
        MarketplaceService.preload()
    except Exception as e:
        logger.warning(f"Marketplace preload failed, will load on first request: {e}")

    yield

    logger.info("Shutting down LearnConnect API")


app = FastAPI(
    title="LearnConnect API",
    description="""
## Academic Portal and Student Marketplace

LearnConnect gives students their semester's notes and lecture videos, tracks
which videos they have finished, and runs a peer marketplace for used books
and equipment.

### How It Works

1. **Register** with an allowed email domain
2. **Select** your year, branch and semester
3. **Study** subjects module by module, ticking off videos
4. **Trade** items on the marketplace; admins review every listing

### Quick Start

```bash
# 1. Sign in
curl -X POST http://localhost:8000/api/v1/auth/login \\
  -H "Content-Type: application/json" \\
  -d '{"email": "you@gmail.com", "password": "..."}'

# 2. List subjects
curl http://localhost:8000/api/v1/content/fy/comps/odd \\
  -H "Authorization: Bearer $TOKEN"

# 3. Browse the marketplace
curl "http://localhost:8000/api/v1/marketplace/items?search=calculator" \\
  -H "Authorization: Bearer $TOKEN"
```
""",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# =============================================================================
# Middleware
# =============================================================================

# Any origin outside production
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    """Add security headers to every response."""
    response = await call_next(request)

    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value

    if (
        request.url.path.startswith(PROTECTED_PREFIXES)
        and "authorization" not in request.headers
    ):
        response.headers["X-Robots-Tag"] = "noindex, nofollow"

    return response


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(LearnConnectException)
async def handle_learnconnect_exception(request: Request, exc: LearnConnectException):
    """Domain errors carry their own status code."""
    return await learnconnect_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_supabase_error(request: Request, exc: SupabaseClientError):
    """Database or RPC failure."""
    logger.error(f"Supabase error on {request.url.path}: {exc}")
    content = {"detail": exc.message, "code": exc.code}
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    return JSONResponse(status_code=502, content=content)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Anything unhandled becomes an opaque 500; the traceback goes to the log."""
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# (module, path under API_PREFIX, tag, tag description)
ROUTERS = [
    (auth_routes, "/auth", "Auth", "Registration, sign-in and the current user's profile"),
    (health, "", "Health", "Liveness and readiness probes"),
    (academics, "/academics", "Academics", "Year, branch and semester selection"),
    (content, "/content", "Content", "Subjects, modules, videos and notes"),
    (progress, "/progress", "Progress", "Video completion tracking"),
    (marketplace, "/marketplace", "Marketplace", "Listings, views, ratings and seller contact"),
    (admin, "/admin", "Admin", "Listing verification and user management"),
    (tasks, "/tasks", "Tasks", "Bulk verification job status"),
    (contributors, "/contributors", "Contributors", "Project contributors from GitHub"),
]

app.openapi_tags = [{"name": tag, "description": text} for _, _, tag, text in ROUTERS]

for module, path, tag, _ in ROUTERS:
    app.include_router(module.router, prefix=f"{API_PREFIX}{path}", tags=[tag])


@app.get("/", tags=["Root"])
async def root():
    """Service name and where to look next."""
    return {
        "name": "LearnConnect API",
        "version": __version__,
        "docs": "/docs",
        "health": f"{API_PREFIX}/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
