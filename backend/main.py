"""
Main FastAPI application
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.config import get_settings
from backend.database import engine, init_models, AsyncSessionLocal
from backend.seed import seed_demo_data
from backend.services.errors import ProcurementError
from backend.api import materials, vendors, sites, inventory, orders, intents, issuances
from backend.api import notifications, dashboard

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables
    await init_models()
    logger.info("Database tables created")

    if settings.SEED_DEMO_DATA:
        async with AsyncSessionLocal() as session:
            await seed_demo_data(session)

    yield

    await engine.dispose()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ProcurementError)
async def procurement_error_handler(request: Request, exc: ProcurementError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Include routers
app.include_router(materials.router, prefix="/api/materials", tags=["Materials"])
app.include_router(vendors.router, prefix="/api/vendors", tags=["Vendors"])
app.include_router(sites.router, prefix="/api/sites", tags=["Sites"])
app.include_router(inventory.router, prefix="/api/inventory", tags=["Inventory"])
app.include_router(orders.router, prefix="/api/orders", tags=["Purchase Orders"])
app.include_router(intents.router, prefix="/api/intents", tags=["Purchase Intents"])
app.include_router(issuances.router, prefix="/api/issuances", tags=["Issuances"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
