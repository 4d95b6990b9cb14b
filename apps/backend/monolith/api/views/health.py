"""
Liveness and readiness probes.

- /healthz: the process is up. No dependency checks.
- /readyz: the database and the cache answer. 503 otherwise.
"""
import logging

from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET

logger = logging.getLogger(__name__)

SERVICE_NAME = 'sarraf-backend'
CACHE_PROBE_KEY = 'sarraf:readyz'


def check_database():
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def check_cache():
    cache.set(CACHE_PROBE_KEY, 'ok', timeout=5)
    if cache.get(CACHE_PROBE_KEY) != 'ok':
        raise RuntimeError("cache did not return the probe value")


READINESS_CHECKS = (
    ('database', check_database),
    ('cache', check_cache),
)


@require_GET
@csrf_exempt
def healthz(request):
    return JsonResponse({'status': 'alive', 'service': SERVICE_NAME})


@require_GET
@csrf_exempt
def readyz(request):
    results = {}
    for name, check in READINESS_CHECKS:
        try:
            check()
            results[name] = 'healthy'
        except Exception as e:
            logger.error(f"Readiness check '{name}' failed: {e}")
            results[name] = 'unhealthy'

    ready = all(result == 'healthy' for result in results.values())
    return JsonResponse(
        {
            'status': 'ready' if ready else 'not_ready',
            'service': SERVICE_NAME,
            'checks': results,
        },
        status=200 if ready else 503,
    )
