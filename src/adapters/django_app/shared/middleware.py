"""
Middleware de métricas de desempenho.

Para requisições em ``/api/`` registra tempo de resposta e uso; respostas
5xx também alimentam a taxa de erro do endpoint.
"""

import logging
import time

from django.conf import settings

logger = logging.getLogger(__name__)


class MetricsMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response
        self.prefixos = tuple(getattr(settings, "METRICS_PATH_PREFIXES", ("/api/",)))

    def __call__(self, request):
        if not request.path.startswith(self.prefixos):
            return self.get_response(request)

        inicio = time.perf_counter()
        response = self.get_response(request)
        tempo_ms = round((time.perf_counter() - inicio) * 1000, 2)
        self._registrar(request, response, tempo_ms)
        return response

    def _registrar(self, request, response, tempo_ms: float) -> None:
        user = getattr(request, "user", None)
        user_id = str(user.id) if user is not None and user.is_authenticated else None
        try:
            from src.config.container import get_container

            monitoring = get_container().monitoring_service()
            monitoring.record_api_usage(request.path, user_id)
            monitoring.record_response_time(request.path, tempo_ms, user_id)
            if response.status_code >= 500:
                monitoring.record_error(request.path, f"HTTP {response.status_code}", user_id)
        except Exception as e:
            # Métricas nunca derrubam a requisição
            logger.warning(f"Falha ao registrar métricas de {request.path}: {e}")
