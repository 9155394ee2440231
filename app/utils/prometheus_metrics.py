"""
Métricas Prometheus: HTTP (via middleware), logs por nível e contadores de
domínio das entregas. Expostas em /api/monitoring/metrics.
"""
import re
from time import time
from typing import Callable

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Métricas de requisições HTTP
http_requests_total = Counter(
    'http_requests_total',
    'Total de requisições HTTP',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'Duração das requisições HTTP em segundos',
    ['method', 'endpoint'],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0]
)

http_errors_total = Counter(
    'http_errors_total',
    'Total de erros HTTP',
    ['method', 'endpoint', 'status_code']
)

active_connections = Gauge(
    'active_connections',
    'Número de conexões ativas'
)

log_messages_total = Counter(
    'log_messages_total',
    'Total de mensagens de log',
    ['level']
)

# Métricas de domínio (entregas)
entregas_transicoes_total = Counter(
    'entregas_transicoes_total',
    'Transições de status de entregas',
    ['de', 'para']
)

zonas_busca_area_total = Counter(
    'zonas_busca_area_total',
    'Buscas de área para desenho de zonas por resultado',
    ['resultado']
)

entregadores_heartbeats_total = Counter(
    'entregadores_heartbeats_total',
    'Heartbeats recebidos de entregadores por status informado',
    ['status']
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Coleta contagem, duração e erros por rota. O endpoint de métricas fica de fora."""

    async def dispatch(self, request: Request, call_next: Callable):
        if request.url.path.endswith("/metrics"):
            return await call_next(request)

        inicio = time()
        active_connections.inc()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            active_connections.dec()
            self._registrar(request, status_code, time() - inicio)

    @staticmethod
    def _endpoint(request: Request) -> str:
        """
        Template da rota (ex.: /api/entregas/admin/despacho/{entrega_id}) para
        não explodir a cardinalidade com ids. Sem rota casada, usa o path cru
        com ids numéricos/uuid trocados.
        """
        route = request.scope.get("route")
        if route is not None and getattr(route, "path", None):
            return route.path
        endpoint = re.sub(r'/[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}', '/{uuid}', request.url.path)
        return re.sub(r'/\d+', '/{id}', endpoint)

    def _registrar(self, request: Request, status_code: int, duracao: float):
        endpoint = self._endpoint(request)
        http_requests_total.labels(method=request.method, endpoint=endpoint, status_code=status_code).inc()
        http_request_duration_seconds.labels(method=request.method, endpoint=endpoint).observe(duracao)
        if status_code >= 400:
            http_errors_total.labels(method=request.method, endpoint=endpoint, status_code=status_code).inc()


def get_metrics():
    """Retorna as métricas no formato Prometheus."""
    return generate_latest()


def record_log(level: str):
    """Registra uma mensagem de log nas métricas."""
    log_messages_total.labels(level=level).inc()


def record_transicao_entrega(de: str, para: str):
    entregas_transicoes_total.labels(de=de, para=para).inc()


def record_busca_area(resultado: str):
    zonas_busca_area_total.labels(resultado=resultado).inc()


def record_heartbeat(status: str):
    entregadores_heartbeats_total.labels(status=status).inc()
