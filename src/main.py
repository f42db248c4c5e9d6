from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from src.config import settings
from src.database import create_tables
from src.logger_config import logger
from src.auth import router as auth_router
from src.buses import router as buses_router
from src.routes import router as routes_router
from src.bookings import router as bookings_router
from src.saved_passengers import router as saved_passengers_router
from src.ratings import router as ratings_router
from src.reviews import router as reviews_router
from src.owners import router as owners_router
from src.admin import router as admin_router

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create tables on startup"""
    create_tables()
    logger.info(f"{settings.PROJECT_NAME} started ({settings.ENVIRONMENT})")
    yield
    logger.info(f"{settings.PROJECT_NAME} shutting down")

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Bus Ticket Booking Marketplace API",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(
    auth_router,
    prefix=f"{settings.API_V1_STR}/auth",
    tags=["Authentication"]
)

app.include_router(
    buses_router,
    prefix=f"{settings.API_V1_STR}/buses",
    tags=["Buses"]
)

app.include_router(
    routes_router,
    prefix=f"{settings.API_V1_STR}/routes",
    tags=["Routes"]
)

app.include_router(
    bookings_router,
    prefix=f"{settings.API_V1_STR}/bookings",
    tags=["Bookings"]
)

app.include_router(
    saved_passengers_router,
    prefix=f"{settings.API_V1_STR}/saved-passengers",
    tags=["Saved Passengers"]
)

app.include_router(
    ratings_router,
    prefix=f"{settings.API_V1_STR}/ratings",
    tags=["Ratings"]
)

app.include_router(
    reviews_router,
    prefix=f"{settings.API_V1_STR}/reviews",
    tags=["Reviews"]
)

app.include_router(
    owners_router,
    prefix=f"{settings.API_V1_STR}/owners",
    tags=["Bus Owners"]
)

app.include_router(admin_router)

@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Bus Ticket Booking Marketplace API",
        "version": "1.0.0",
        "docs": "/docs"
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
