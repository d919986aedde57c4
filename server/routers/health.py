"""
Health check endpoints for deployment.

Provides:
- /health - Basic liveness check (is the app running?)
- /ready - Readiness check (is the storage backend reachable?)
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Response

from stores.kv_store import KeyValueStore, StorageError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

# Service references (set during app initialization)
_store: Optional[KeyValueStore] = None
_backend_name: str = ""


def set_health_dependencies(store: Optional[KeyValueStore] = None, backend_name: str = ""):
    """Set dependencies for health checks."""
    global _store, _backend_name
    _store = store
    _backend_name = backend_name


@router.get("/health")
async def health_check():
    """
    Basic liveness check - is the app running?

    This endpoint should always return 200 if the process is alive.
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/ready")
async def readiness_check():
    """
    Readiness check - can the app persist games?

    Returns 503 if the storage backend is missing or unreachable.
    """
    if _store is None:
        check = {"status": "not_configured"}
        healthy = False
    else:
        try:
            _store.ping()
            check = {"status": "ok", "backend": _backend_name}
            healthy = True
        except StorageError as e:
            logger.warning(f"Storage health check failed: {e}")
            check = {"status": "error", "backend": _backend_name, "message": str(e)}
            healthy = False

    return Response(
        content=json.dumps({
            "status": "ok" if healthy else "degraded",
            "checks": {"storage": check},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }),
        status_code=200 if healthy else 503,
        media_type="application/json",
    )
