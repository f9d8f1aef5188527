import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from verbdrill.routers import quiz
from verbdrill.database import init_db
from verbdrill.config import get_settings

settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    await init_db()
    yield


app = FastAPI(
    title="Verb Drill API",
    description="Backend for adaptive irregular verb and vocabulary drills",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS - configurable via ALLOWED_ORIGINS env var
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quiz.router, prefix="/api", tags=["quiz"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
