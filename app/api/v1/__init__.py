"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import alerts, findings, health

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(alerts.router, prefix="/alerts", tags=["alerts"])
router.include_router(findings.router, prefix="/findings", tags=["findings"])
