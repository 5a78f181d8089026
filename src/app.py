"""
Blog Posts API Server
Core functionality: create, list, fetch, update and delete blog posts
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import ALLOWED_ORIGINS, MEMORY_DATABASE_URL, get_database_url
from database.connection import init_database, close_database
from api.routes import health, posts
from utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    if get_database_url() == MEMORY_DATABASE_URL:
        logger.warning("Using in-memory post store - data is lost on shutdown")
        yield
        return

    await init_database()
    yield
    await close_database()

# FastAPI app initialization
app = FastAPI(
    title="Blog Posts Backend",
    description="REST API for blog posts",
    version="1.0.0",
    lifespan=lifespan
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Setup centralized error handling
setup_error_handling(app)

# Include API routes
app.include_router(health.router, tags=["Health"])
app.include_router(posts.router, prefix="/posts", tags=["Posts"])

# FastAPI app instance is exported for use by uvicorn
# Server startup is handled by main.py at the project root
