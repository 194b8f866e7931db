"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from app.api.routes import bookings

api_router = APIRouter()
api_router.include_router(bookings.router)
