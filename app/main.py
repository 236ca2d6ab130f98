from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional, Union
import uvicorn

from app.core.config import settings
from app.core.database import ping_db, close_db
from app.core.exceptions import register_exception_handlers
from app.core.logging import setup_logging
from app.middleware.logging_middleware import LoggingMiddleware, StructlogMiddleware
from app.models.enums import StorageBackend
from app.controllers import product_controller, product_csv_controller, thirdparty_controller

logger = setup_logging()

VERSION = "1.0.0"


def _lifespan(storage_backend: StorageBackend):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Application startup",
            environment=settings.environment,
            storage_backend=storage_backend.value,
        )
        if storage_backend == StorageBackend.MONGO:
            try:
                await ping_db()
            except Exception as e:
                # requests will surface the error; startup still proceeds
                logger.error("MongoDB is not reachable", error=str(e))
        else:
            logger.info("Serving products from CSV", csv_path=settings.csv_path)

        yield

        logger.info("Application shutdown")
        if storage_backend == StorageBackend.MONGO:
            try:
                await close_db()
                logger.info("Database connections closed")
            except Exception as e:
                logger.error("Error during shutdown", error=str(e))

    return lifespan


def create_app(storage_backend: Optional[Union[StorageBackend, str]] = None) -> FastAPI:
    backend = StorageBackend(storage_backend) if storage_backend else settings.get_storage_backend()

    app = FastAPI(
        title="Products API",
        description="Product catalogue REST API backed by MongoDB or a CSV file",
        version=VERSION,
        lifespan=_lifespan(backend),
        docs_url="/docs" if settings.environment == "local" else None,
        redoc_url="/redoc" if settings.environment == "local" else None,
    )
    app.state.storage_backend = backend

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # added last runs first: LoggingMiddleware assigns the request id
    app.add_middleware(StructlogMiddleware)
    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    products_router = (
        product_csv_controller.router if backend == StorageBackend.CSV else product_controller.router
    )
    app.include_router(products_router, prefix=settings.api_prefix)
    app.include_router(thirdparty_controller.router, prefix=settings.api_prefix)

    @app.get("/")
    async def root():
        return {
            "message": "Products API is running",
            "version": VERSION,
            "environment": settings.environment,
            "storage_backend": backend.value,
            "docs_url": "/docs" if settings.environment == "local" else "Documentation disabled in production"
        }

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "environment": settings.environment,
            "storage_backend": backend.value,
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "local",
        log_config=None
    )
