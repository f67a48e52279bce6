from fastapi import APIRouter

from linedash.api.routes import (
    analytics,
    health,
    production_lines,
    production_orders,
    products,
)

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])

# Reports
api_router.include_router(analytics.router)

# Production records and line configuration
api_router.include_router(production_orders.router)
api_router.include_router(production_lines.router)
api_router.include_router(products.router)
