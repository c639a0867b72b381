"""Triple A Book Club API - Main Application"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bookclub import __version__
from bookclub.auth.middleware import AuthRedirectMiddleware
from bookclub.config import settings, validate_production_settings
from bookclub.routes import (
    admin,
    auth,
    books,
    calendar,
    gallery,
    meetups,
    member_profile,
    members,
    portal_status,
    suggestions,
    votes,
)
from bookclub.services.database_service import DatabaseService

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("Starting Book Club API...")
    if not settings.debug:
        for warning in validate_production_settings(settings):
            logger.warning(f"Production config warning: {warning}")

    if getattr(app.state, "db", None) is None:
        app.state.db = DatabaseService(settings.database_path)
    app.state.db.connect()
    yield
    # Shutdown
    logger.info("Shutting down Book Club API...")
    app.state.db.close()


app = FastAPI(
    title=settings.app_name,
    description="Members, books, suggestions, votes, gallery and meet-ups for the book club",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(AuthRedirectMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed or missing fields are a 400 with a readable message"""
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query"))
        messages.append(f"{field}: {error.get('msg')}" if field else error.get("msg"))
    return JSONResponse(
        status_code=400,
        content={"detail": "; ".join(messages) or "Invalid request"}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(books.router, prefix="/api/books", tags=["Books"])
app.include_router(suggestions.router, prefix="/api/suggestions", tags=["Suggestions"])
app.include_router(votes.router, prefix="/api/votes", tags=["Votes"])
app.include_router(members.router, prefix="/api/members", tags=["Members"])
app.include_router(member_profile.router, prefix="/api/member", tags=["Member Profile"])
app.include_router(gallery.router, prefix="/api/gallery", tags=["Gallery"])
app.include_router(meetups.router, prefix="/api/meetups", tags=["Meetups"])
app.include_router(calendar.router, prefix="/api", tags=["Calendar"])
app.include_router(portal_status.router, prefix="/api/portal-status", tags=["Portal Status"])


# Health check endpoints
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "bookclub-api",
        "version": __version__
    }
