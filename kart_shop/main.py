"""
Kuching ART Shop

Merchandise storefront for the Kuching ART transit demo: catalog, cart,
checkout, mock login and the canned ticket/payment endpoints.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

from .core.config import settings
from .core.session import session_manager
from .database.carts import cart_db
from .database.merchandise import merchandise_db
from .routes import (
    merchandise_router,
    cart_router,
    checkout_router,
    auth_router,
    demo_router,
)
from .security.identity import IdentityMiddleware, token_service

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"{settings.app_name} starting up...")
    logger.info(f"Catalog loaded with {len(merchandise_db.get_all_merchandise())} item(s)")
    yield
    dropped = cart_db.purge_expired(session_manager, settings.session_max_age_hours)
    logger.info(f"{settings.app_name} shutting down, {dropped} expired cart(s) dropped")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Merchandise shop and ticketing demo for Kuching ART",
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

# Bearer token identity
app.add_middleware(IdentityMiddleware, tokens=token_service)

# Static files and templates
static_dir = os.path.join(os.path.dirname(__file__), "static")
templates_dir = os.path.join(os.path.dirname(__file__), "templates")

if os.path.exists(static_dir):
    app.mount("/static", StaticFiles(directory=static_dir), name="static")

templates = Jinja2Templates(directory=templates_dir) if os.path.exists(templates_dir) else None

# Include API routers
app.include_router(merchandise_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(auth_router)
app.include_router(demo_router)


@app.get("/")
async def home(request: Request):
    """Storefront home page"""
    if templates:
        items, _ = merchandise_db.search(in_stock_only=False, limit=100)
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "title": settings.app_name,
                "items": items,
                "currency": settings.currency,
            },
        )
    return {
        "message": f"{settings.app_name} API",
        "docs": "/docs",
        "endpoints": {
            "merchandise": "/api/merchandise",
            "cart": "/api/cart",
            "checkout": "/api/checkout",
            "auth": "/api/auth",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "kart-shop"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "kart_shop.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
