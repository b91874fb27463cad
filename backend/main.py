"""
Task Graph Backend API

FastAPI application serving the GraphQL API for shared task lists and the
course catalog, backed by MongoDB.
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from backend.graphql import create_graphql_router
from src.core.config import get_config
from src.core.document_store import DocumentStore
from src.core.mongo_manager import close_mongo_manager, get_mongo_manager
from src.utils.logger import get_logger, setup_logger_from_config

config = get_config()
setup_logger_from_config(config)

logger = get_logger(__name__)

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle handler for startup and shutdown"""
    logger.info("🚀 Starting Task Graph API...")

    mongo_manager = get_mongo_manager(config.mongodb_config)

    # Sync connection pings the server and creates indexes
    mongo_manager.connect_sync()

    app.state.mongo_manager = mongo_manager
    app.state.document_store = DocumentStore(mongo_manager.async_db, mongo_manager.collections)

    logger.info("✅ API startup complete")

    yield

    logger.info("🔒 Shutting down Task Graph API...")
    close_mongo_manager()
    logger.info("✅ API shutdown complete")


app = FastAPI(
    title="Task Graph API",
    description="Shared task lists and course catalog over GraphQL",
    version=APP_VERSION,
    lifespan=lifespan
)


# CORS Middleware
if config.get('api.cors.enabled', True):
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.get('api.cors.allow_credentials', True),
        allow_methods=["*"],
        allow_headers=["*"],
    )


app.include_router(create_graphql_router(graphiql=config.graphiql_enabled), prefix="/graphql")


@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "name": "Task Graph API",
        "version": APP_VERSION,
        "status": "running",
        "graphql": "/graphql"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    mongo_manager = getattr(app.state, "mongo_manager", None)
    if mongo_manager is None or not mongo_manager.ping():
        raise HTTPException(status_code=503, detail="Service unavailable")

    return {
        "status": "healthy",
        "database": "connected",
        "database_name": mongo_manager.database_name,
    }


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Custom HTTP exception handler"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """General exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "status_code": 500
        }
    )


if __name__ == "__main__":
    import uvicorn

    host = config.get('api.host', '0.0.0.0')
    port = int(config.get('api.port', 4000))
    reload = bool(config.get('api.reload', False))

    logger.info(f"🚀 Starting API server on {host}:{port}")

    uvicorn.run(
        "backend.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )
