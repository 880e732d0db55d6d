# pipe_catalog/main.py
# Pipe Catalog API - cross-entity search over pipes, tobaccos and accessories
from __future__ import annotations
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pipe_catalog.settings import settings
from pipe_catalog.database import init_db, close_db, check_db_health, get_sessionmaker
from pipe_catalog.errors import SearchError
from pipe_catalog.routers.search import router as search_router

# ---------------------------------------------------------
# Logging setup
# ---------------------------------------------------------
from pipe_catalog.logging_setup import setup_logging
setup_logging(settings)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------
# Lifespan: Database init/cleanup
# ---------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    await init_db()
    logger.info("database engine ready")
    yield
    await close_db()
    logger.info("database engine disposed")

# ---------------------------------------------------------
# FastAPI app + CORS
# ---------------------------------------------------------
app = FastAPI(
    title="Pipe Catalog API",
    version="1.0.0",
    description="Pipes, tobaccos and accessories - catalog search",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.exception_handler(SearchError)
async def search_error_handler(request: Request, exc: SearchError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


app.include_router(search_router)


@app.get("/")
def root():
    return {"message": "Pipe Catalog API is running.", "version": app.version}


@app.get("/health")
async def health(sessions: async_sessionmaker[AsyncSession] = Depends(get_sessionmaker)):
    return await check_db_health(sessions)
