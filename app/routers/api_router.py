from fastapi import APIRouter
from app.routers import auth, companies, developers, performance_reports, setup, teams

# Centralized API router hub
# Routers are aggregated here and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(setup.router, prefix="/init", tags=["System Setup"])
api_router.include_router(companies.router, tags=["Companies"])
api_router.include_router(teams.router, tags=["Teams"])
api_router.include_router(developers.router, tags=["Developers"])
api_router.include_router(performance_reports.router, tags=["Performance Reports"])
