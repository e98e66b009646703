import logging
import time

from django.conf import settings
from django.db import connections
from django.db.utils import OperationalError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

logger = logging.getLogger("hackhub.core")


class HealthCheckView(APIView):
    """
    Public uptime probe.
    Reports database reachability and how notices are delivered
    (in-process eager tasks or a Celery broker).
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, *args, **kwargs):
        start = time.monotonic()

        db_ok = True
        try:
            with connections["default"].cursor() as cursor:
                cursor.execute("SELECT 1")
        except OperationalError:
            logger.warning("Health check could not reach the database")
            db_ok = False

        eager = bool(getattr(settings, "CELERY_TASK_ALWAYS_EAGER", False))

        return Response(
            {
                "success": db_ok,
                "status": "ok" if db_ok else "degraded",
                "db": db_ok,
                "notice_delivery": "eager" if eager else "broker",
                "env": getattr(settings, "ENV", "unknown"),
                "latency_ms": int((time.monotonic() - start) * 1000),
            },
            status=200 if db_ok else 503,
        )
