from fastapi import APIRouter
from app.api.v1 import clinics, search, health

api_router = APIRouter()
api_router.include_router(clinics.router)
api_router.include_router(search.router)
api_router.include_router(health.router)
