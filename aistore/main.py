from contextlib import asynccontextmanager

from fastapi import FastAPI

from aistore.core.catalog import load_catalog, reset_catalog
from aistore.core.config import settings
from aistore.core.logging_config import setup_logging
from aistore.routers.product import router as product_router
from aistore.routers.search import router as search_router

# Setup logging (must be done before any other imports that use logging)
setup_logging(log_level=settings.LOG_LEVEL, debug=settings.DEBUG)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    load_catalog()
    yield
    # Shutdown
    reset_catalog()


app = FastAPI(
    title=settings.APP_NAME,
    description="Product catalog browsing with plain and natural-language (AI) search",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(product_router, prefix="/api/v1")
app.include_router(search_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.APP_NAME}"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
