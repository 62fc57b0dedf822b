"""API Routes."""

from fastapi import APIRouter

from .admin_analytics import router as admin_analytics_router
from .admin_content import router as admin_content_router
from .admin_rss import router as admin_rss_router
from .auth import router as auth_router
from .billing import router as billing_router
from .checkout import router as checkout_router
from .health import router as health_router
from .news import router as news_router
from .pages import router as pages_router
from .tools import router as tools_router

# Create main API router
api_router = APIRouter()

# Include route modules
api_router.include_router(health_router, tags=["Health"])
api_router.include_router(pages_router)
api_router.include_router(auth_router)
api_router.include_router(tools_router)
api_router.include_router(news_router)
api_router.include_router(billing_router)
api_router.include_router(admin_content_router)
api_router.include_router(admin_rss_router)
api_router.include_router(admin_analytics_router)

# Mounted under /api (not /api/v1) where the pricing page expects it
__all__ = ["api_router", "checkout_router"]
