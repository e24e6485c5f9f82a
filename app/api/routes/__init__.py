from fastapi import APIRouter
from app.api.routes import health, requirements, coverage, test_cases, integrations

api_router = APIRouter()

# Include all route modules
api_router.include_router(health.router)
api_router.include_router(requirements.router)
api_router.include_router(coverage.router)
api_router.include_router(test_cases.router)
api_router.include_router(integrations.router)
