"""
Health check endpoints for deployment readiness.

Provides:
- /health/live: Liveness probe (process is running)
- /health/ready: Readiness probe (store and reply generator bootstrapped)

Both endpoints reflect gateway state WITHOUT calling external services.
"""

import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict


@dataclass
class HealthStatus:
    """Health status response."""

    status: str  # "healthy", "unhealthy"
    timestamp: str
    ready: bool
    uptime_seconds: float
    reply_mode: str  # "rules", "openai", "ollama", "stub"
    signature_verification: bool
    message: str
    metadata: Dict[str, Any]


class HealthChecker:
    """
    Health checker for gateway readiness.

    Invariant: Health checks do NOT verify external services.
    An unreachable model backend is covered by the fallback reply path.
    """

    def __init__(self, start_time: float):
        """Initialize health checker."""
        self.start_time = start_time

    def _base(self, reply_mode: str) -> Dict[str, Any]:
        from config import Config

        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime_seconds": time.time() - self.start_time,
            "reply_mode": reply_mode,
            "signature_verification": Config.signature_verification_enabled(),
        }

    def check_live(self) -> HealthStatus:
        """
        Liveness probe: Is the gateway process running?

        Always returns healthy if this endpoint responds. Does not bootstrap;
        reply_mode is "not_bootstrapped" until the pipeline exists.
        """
        from infra import InfraBootstrap

        infra = InfraBootstrap.current()
        reply_mode = infra.config.reply_mode if infra else "not_bootstrapped"

        return HealthStatus(
            status="healthy",
            ready=True,
            message="Gateway process is running",
            metadata={},
            **self._base(reply_mode),
        )

    def check_ready(self) -> HealthStatus:
        """
        Readiness probe: Can the gateway serve turns?

        Ready if the infrastructure bootstrap produced a store and a
        reply generator. reply_mode is the one the running pipeline uses.
        """
        reply_mode = "unavailable"
        try:
            from infra import bootstrap_infrastructure

            infra = bootstrap_infrastructure()
            ready = True
            message = "Pipeline initialized"
            reply_mode = infra.config.reply_mode
            metadata = {
                "store": type(infra.get_store()).__name__,
                "reply_generator": type(infra.get_reply_generator()).__name__,
            }
        except Exception as e:
            ready = False
            message = f"Infrastructure bootstrap failed: {e}"
            metadata = {}

        return HealthStatus(
            status="healthy" if ready else "unhealthy",
            ready=ready,
            message=message,
            metadata=metadata,
            **self._base(reply_mode),
        )

    def to_dict(self, status: HealthStatus) -> Dict[str, Any]:
        """Convert HealthStatus to dict for JSON serialization."""
        return asdict(status)


# Global health checker instance
_health_checker: HealthChecker = None  # type: ignore


def initialize_health_checker():
    """Initialize global health checker."""
    global _health_checker
    _health_checker = HealthChecker(start_time=time.time())


def get_health_checker() -> HealthChecker:
    """Get or initialize health checker."""
    global _health_checker
    if _health_checker is None:
        initialize_health_checker()
    return _health_checker  # type: ignore


async def health_live() -> Dict[str, Any]:
    """GET /health/live endpoint."""
    checker = get_health_checker()
    return checker.to_dict(checker.check_live())


async def health_ready() -> Dict[str, Any]:
    """GET /health/ready endpoint."""
    checker = get_health_checker()
    return checker.to_dict(checker.check_ready())
