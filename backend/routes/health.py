"""Health check endpoints for the backend API."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from backend.deps import Services, get_services

router = APIRouter(tags=["health"])

ENDPOINTS = ["/stock/:symbol", "/reddit/:symbol", "/all/:symbol"]


@router.get("/")
async def root() -> Dict[str, Any]:
    return {
        "message": "Reddit Stock Sentiment Tracker API is running!",
        "endpoints": ENDPOINTS,
        "status": "healthy",
    }


@router.get("/health")
async def health(services: Services = Depends(get_services)) -> Dict[str, Any]:
    """Return a tolerant health payload that never raises."""

    return {
        "ok": True,
        "backend": services.backend,
        "cache_entries": len(services.cache),
    }
