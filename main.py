import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from api import api_router
from config.settings import API_HOST, API_PORT, APP_ENV, CORS_ORIGINS
from database.connection import create_db_and_tables
from database.seed import seed_database
from utils.logger import get_logger

# Initialize logger
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - runs on startup and shutdown"""
    logger.info(f"Starting Interex admin API ({APP_ENV})...")
    create_db_and_tables()
    logger.info("Database tables created/verified")
    seed_database()
    yield
    logger.info("Shutting down application...")


# Create FastAPI app with lifespan
app = FastAPI(
    title="Interex",
    version="1.0.0",
    description="Interex healthcare submission administration API",
    lifespan=lifespan
)

# Include API routes
app.include_router(api_router, prefix="/api")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"status": "ok", "environment": APP_ENV}


if __name__ == "__main__":
    uvicorn.run(app, host=API_HOST, port=API_PORT)
