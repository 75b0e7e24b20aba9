"""
Blog Posts API Server
Core functionality: CRUD over blog posts held in a document store
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blog_api import __version__
from blog_api.config.settings import ALLOWED_ORIGINS, DATABASE_URL, ENV, LOG_LEVEL
from blog_api.database.connection import close_database, get_post_store, init_database
from blog_api.api.routes import health, posts
from blog_api.utils.error_handling import setup_error_handling

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager; leaves an already-connected store alone"""
    owns_store = get_post_store() is None
    if owns_store:
        await init_database(DATABASE_URL)
    logger.info(f"Blog Posts API started (env: {ENV})")
    yield
    if owns_store:
        await close_database()


# FastAPI app initialization
app = FastAPI(
    title="Blog Posts API",
    description="CRUD API for blog posts backed by a document store",
    version=__version__,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Setup centralized error handling
setup_error_handling(app)

# Include API routes
app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(posts.router, prefix="/posts", tags=["Posts"])
