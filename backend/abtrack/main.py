"""Main FastAPI application."""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from abtrack.config import settings
from abtrack.api import events, feedback, stats, seed
from abtrack.database import init_db
from abtrack.utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup."""
    init_db()
    logger.info(f"abtrack API ready (environment: {settings.environment})")
    yield


app = FastAPI(
    title="abtrack API",
    description="Interaction event ingestion and A/B analytics",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(events.router)
app.include_router(feedback.router)
app.include_router(stats.router)
app.include_router(seed.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "abtrack API running",
        "endpoints": ["/api/health", "/api/stats", "/api/heatmap", "/api/feedback", "/api/events"],
        "docs": "/docs",
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"ok": True}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
