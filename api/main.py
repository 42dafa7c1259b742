# api/main.py
from dotenv import load_dotenv
import os

env = os.getenv("APP_ENV", "local")
if env == "local":
    load_dotenv(".env.local")
else:
    load_dotenv(".env")

from fastapi import FastAPI
from contextlib import asynccontextmanager
import logging
from database.db import init_db
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from api.routers import (
    health,
    sessions,
    analyze,
    export,
)
from services.llm_service import is_llm_configured

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)
logger.info(f"🔧 Loaded environment: {env}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Starting Paper Studio API: initializing DB")
    try:
        if os.getenv("CREDENTIAL_STORE", "sql").lower() == "sql":
            init_db()
    except Exception as e:
        logger.error(f"❌ Failed to initialize database: {e}", exc_info=True)
        raise
    if not is_llm_configured():
        logger.warning("[warn] Missing model API key. Summaries will be skipped.")
    yield
    logger.info("🛑 Shutting down Paper Studio API")


app = FastAPI(
    title="Paper Studio API",
    version="1.0.0",
    description="Upload research papers, extract their text and get structured LLM summaries.",
    lifespan=lifespan
)

# CORS Configuration
origins = []
if env == "local":
    origins = ["http://localhost:3000", "http://localhost:5173"]  # Common dev ports
else:
    origins_str = os.getenv("ALLOWED_ORIGINS", "")
    origins = [origin.strip() for origin in origins_str.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(health.router, tags=["Health"])
app.include_router(sessions.router, tags=["Sessions"])
app.include_router(analyze.router, tags=["Analysis"])
app.include_router(export.router, tags=["Export"])
