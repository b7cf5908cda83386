"""Main FastAPI application."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chequeflow import __version__
from chequeflow.config import settings
from chequeflow.checks import routes as check_routes

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

# Create FastAPI app
app = FastAPI(
    title="Chequeflow API",
    description="Deadline tracking for dishonored cheques - dishonor, legal notice, case filing",
    version=__version__,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(check_routes.router, prefix=f"{settings.API_V1_PREFIX}/checks", tags=["Checks"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Chequeflow API",
        "version": __version__,
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "chequeflow.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
