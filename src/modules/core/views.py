import time
from typing import Any, Callable, Dict

import structlog
from django.core.cache import cache
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

logger = structlog.get_logger()

HEALTH_CACHE_KEY = "_health_check"


def _ping_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _ping_cache() -> None:
    cache.set(HEALTH_CACHE_KEY, "ok", 10)
    if cache.get(HEALTH_CACHE_KEY) != "ok":
        raise ConnectionError("Cache read failed")


def _probe(name: str, ping: Callable[[], None]) -> Dict[str, Any]:
    start = time.monotonic()
    try:
        ping()
    except Exception as exc:
        logger.error("health.probe_failed", service=name, error=str(exc))
        return {"status": "down"}
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
    }


def health_check(request: HttpRequest) -> JsonResponse:
    """Liveness of the order store (database) and the cache/broker host."""
    services = {
        "database": _probe("database", _ping_database),
        "cache": _probe("cache", _ping_cache),
    }
    healthy = all(service["status"] == "up" for service in services.values())
    status = "healthy" if healthy else "unhealthy"

    logger.info("health.checked", status=status)
    return JsonResponse(
        {
            "status": status,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )


class AdminSessionView(APIView):
    """Return the identity behind the current admin bearer token.

    The admin dashboard calls this on load to decide whether its stored
    token is still valid:
    * No token  -> 401
    * Bad token -> 401
    * Valid JWT -> 200
    """

    permission_classes = [IsAuthenticated]

    def get(self, request: HttpRequest) -> Response:
        return Response(
            {
                "username": request.user.get_username(),
                "is_staff": request.user.is_staff,
            }
        )
