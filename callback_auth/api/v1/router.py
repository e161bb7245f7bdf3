"""
API v1 Router
Main router for all API v1 endpoints
"""

from fastapi import APIRouter

from callback_auth.api.v1.endpoints import auth

api_router = APIRouter()

# Authentication endpoints
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
