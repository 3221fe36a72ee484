"""
SeatSmart - Guest Seating Planner FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from seatsmart.core.config import settings
from seatsmart.core.db import engine, Base
from seatsmart.api import routes_admin, routes_guest, routes_public

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    if not settings.USE_FIREBASE:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    else:
        logger.info("Using Firestore for seating plan storage")
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="SeatSmart",
    description="Guest list normalization and table seating planner",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_guest.router, prefix="/guest", tags=["guest"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])

@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "name": "SeatSmart",
        "admin": "/admin/plans",
        "guest_lookup": "/guest/lookup",
        "docs": "/docs"
    }

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
