"""
Retail Cart Service

HTTP front end for the cart engine: carts, line items and promotion codes.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

from .core.config import settings
from .database.promotions import promotion_db
from .errors import CartServiceError, cart_service_error_handler
from .routes import cart_router, promotions_router

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"{settings.app_name} starting up...")
    logger.info(f"Promotion catalog: {len(promotion_db)} codes, business date {settings.today()}")
    logger.info(f"Strict product lookup: {'enabled' if settings.strict_product_lookup else 'disabled'}")
    yield
    logger.info(f"{settings.app_name} shutting down...")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Shopping cart with promotion codes, activation windows and combinability rules",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(CartServiceError, cart_service_error_handler)

# Include API routers
app.include_router(cart_router)
app.include_router(promotions_router)


@app.get("/")
async def home():
    """Service index"""
    return {
        "message": "Retail Cart API",
        "docs": "/docs",
        "endpoints": {
            "cart": "/api/cart",
            "promotions": "/api/promotions",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "cart-service"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cart_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
