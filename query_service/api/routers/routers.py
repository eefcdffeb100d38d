# Central API router include file
from fastapi import APIRouter

# Import domain routers
from query_service.search.router import router as search_router
from query_service.ai.router import router as ai_router

# Create main API router
api_router = APIRouter()

# Include domain routers
api_router.include_router(search_router)
api_router.include_router(ai_router)
