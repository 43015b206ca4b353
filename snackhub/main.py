from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import logging

# Import database components
from snackhub.database.database import engine, Base

# Import middleware and error handlers
from snackhub.common.middleware import SecurityHeadersMiddleware, RequestLoggingMiddleware
from snackhub.common.errors import register_exception_handlers

# Import routers
from snackhub.modules.auth.router import auth_router
from snackhub.modules.access.router import access_router
from snackhub.modules.roles.router import role_router
from snackhub.modules.users.router import user_router
from snackhub.modules.products.router import product_router
from snackhub.modules.orders.router import order_router
from snackhub.modules.feedback.router import feedback_router
from snackhub.modules.dashboard.router import dashboard_router

# Import models for table creation
import snackhub.modules.auth.models
import snackhub.modules.roles.models
import snackhub.modules.users.models
import snackhub.modules.products.models
import snackhub.modules.orders.models
import snackhub.modules.feedback.models

from snackhub.core.config import settings

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.ENVIRONMENT == "production" else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api"

# FastAPI app
app = FastAPI(
    title="SnackHub API",
    description="Point-of-sale and inventory API for snack shops",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None
)

# Add middleware (order matters!)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL] if settings.ENVIRONMENT == "production" else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(access_router, prefix=API_PREFIX)
app.include_router(role_router, prefix=API_PREFIX)
app.include_router(user_router, prefix=API_PREFIX)
app.include_router(product_router, prefix=API_PREFIX)
app.include_router(order_router, prefix=API_PREFIX)
app.include_router(feedback_router, prefix=API_PREFIX)
app.include_router(dashboard_router, prefix=API_PREFIX)

# Create database tables (idempotent; existing tables are left as they are)
Base.metadata.create_all(bind=engine)


@app.get("/")
async def read_root():
    return {
        "message": "SnackHub API is running",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}


@app.on_event("startup")
async def startup_event():
    logger.info("SnackHub API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("SnackHub API shutting down...")
