"""Business logic services."""

from app.services.readiness_service import ReadinessService, ServiceConfig, build_readiness_service

__all__ = [
    "ReadinessService",
    "ServiceConfig",
    "build_readiness_service",
]
