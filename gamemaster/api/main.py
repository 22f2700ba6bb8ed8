"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gamemaster import __version__
from gamemaster.api.routes import adventures, exploration
from gamemaster.core.config import settings
from gamemaster.core.logging import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    configure_logging()
    settings.adventures_dir.mkdir(parents=True, exist_ok=True)

    yield


app = FastAPI(
    title="AI Dungeon Master",
    description="Exploration context service for an AI-assisted Dungeon Master",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for the browser front-end
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(adventures.router, prefix="/api/adventures", tags=["Adventures"])
app.include_router(exploration.router, prefix="/api/exploration", tags=["Exploration"])


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "AI Dungeon Master",
        "version": __version__,
    }


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "components": {
            "api": "ok",
            "adventures_dir": "present" if settings.adventures_dir.exists() else "missing",
        },
    }


def run() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "gamemaster.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
