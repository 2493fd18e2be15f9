"""
Serviço de monitoramento de desempenho.

Registra métricas, gera alertas quando limites são ultrapassados e
calcula estatísticas (média, p95, p99) por período.
"""

import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from src.core.shared.exceptions import ValidationError

from .entities import Alert, Metric, MetricType, Severity
from .ports import Contador, DictContador, MetricRepository


logger = logging.getLogger(__name__)

LIMITES_PADRAO = {
    MetricType.RESPONSE_TIME: 1000,  # ms
    MetricType.ERROR_RATE: 0.05,
    MetricType.CACHE_HIT_RATE: 0.7,
    MetricType.DATABASE_QUERY_TIME: 500,  # ms
    MetricType.MEMORY_USAGE: 0.8,
    MetricType.CPU_USAGE: 0.7,
}

# (crítico, alto, médio) como múltiplos do limite
_FAIXAS_TEMPO = (2.0, 1.5, 1.2)
_FAIXAS_TAXA = (1.5, 1.3, 1.1)
_FAIXAS_CACHE = (0.5, 0.7, 0.9)

JANELA_CONTADORES = 3600


def percentil(valores: Sequence[float], p: float) -> float:
    """Percentil pelo método nearest-rank; lista vazia retorna 0."""
    if not valores:
        return 0
    ordenados = sorted(valores)
    indice = max(0, math.ceil(p / 100 * len(ordenados)) - 1)
    return ordenados[indice]


class MonitoringService:
    """
    Coleta de métricas e alertas.

    Example:
        service = MonitoringService(repo)
        alerta = service.record_metric(MetricType.RESPONSE_TIME, 2500, "/api/x")
        alerta.severity  # Severity.CRITICAL
    """

    def __init__(
        self,
        repository: MetricRepository,
        contador: Optional[Contador] = None,
        limites: Optional[Dict[MetricType, float]] = None,
    ):
        self.repository = repository
        self.contador = contador or DictContador()
        self.limites = {**LIMITES_PADRAO, **(limites or {})}

    def record_metric(
        self,
        metric_type: MetricType,
        value: float,
        endpoint: Optional[str] = None,
        user_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Alert]:
        """
        Registra métrica e, se o limite for ultrapassado, o alerta.

        Returns:
            Alerta gerado ou None
        """
        metric = Metric(
            type=metric_type,
            value=value,
            endpoint=endpoint,
            user_id=user_id,
            metadata=metadata or {},
        )
        self.repository.save_metric(metric)

        alerta = self.verificar_limite(metric)
        if alerta:
            self.repository.save_alert(alerta)
            if alerta.severity in (Severity.HIGH, Severity.CRITICAL):
                logger.warning(f"[ALERTA {alerta.severity.value.upper()}] {alerta.message}")
        return alerta

    def record_response_time(
        self, endpoint: str, tempo_ms: float, user_id: Optional[str] = None
    ) -> Optional[Alert]:
        return self.record_metric(MetricType.RESPONSE_TIME, tempo_ms, endpoint, user_id)

    def record_api_usage(self, endpoint: str, user_id: Optional[str] = None) -> None:
        chave = f"requests_count:{endpoint}"
        self.contador.set(chave, (self.contador.get(chave) or 0) + 1, JANELA_CONTADORES)
        self.record_metric(MetricType.API_USAGE, 1, endpoint, user_id)

    def record_error(
        self, endpoint: str, erro: str, user_id: Optional[str] = None
    ) -> Optional[Alert]:
        """Incrementa erros do endpoint e registra a taxa de erro na janela."""
        chave_erros = f"error_count:{endpoint}"
        erros = (self.contador.get(chave_erros) or 0) + 1
        self.contador.set(chave_erros, erros, JANELA_CONTADORES)
        requisicoes = self.contador.get(f"requests_count:{endpoint}") or 1
        return self.record_metric(
            MetricType.ERROR_RATE,
            min(1.0, erros / requisicoes),
            endpoint,
            user_id,
            {"error": erro},
        )

    def record_cache_hit_rate(self, taxa: float) -> Optional[Alert]:
        return self.record_metric(MetricType.CACHE_HIT_RATE, taxa)

    def record_database_query_time(self, consulta: str, tempo_ms: float) -> Optional[Alert]:
        return self.record_metric(
            MetricType.DATABASE_QUERY_TIME, tempo_ms, metadata={"query_name": consulta}
        )

    def verificar_limite(self, metric: Metric) -> Optional[Alert]:
        limite = self.limites.get(metric.type)
        if limite is None:
            return None

        if metric.type == MetricType.CACHE_HIT_RATE:
            if metric.value >= limite:
                return None
            critico, alto, medio = (limite * f for f in _FAIXAS_CACHE)
            if metric.value < critico:
                severidade = Severity.CRITICAL
            elif metric.value < alto:
                severidade = Severity.HIGH
            elif metric.value < medio:
                severidade = Severity.MEDIUM
            else:
                severidade = Severity.LOW
        else:
            if metric.value <= limite:
                return None
            faixas = (
                _FAIXAS_TEMPO
                if metric.type in (MetricType.RESPONSE_TIME, MetricType.DATABASE_QUERY_TIME)
                else _FAIXAS_TAXA
            )
            critico, alto, medio = (limite * f for f in faixas)
            if metric.value > critico:
                severidade = Severity.CRITICAL
            elif metric.value > alto:
                severidade = Severity.HIGH
            elif metric.value > medio:
                severidade = Severity.MEDIUM
            else:
                severidade = Severity.LOW

        return Alert(
            type=f"{metric.type.value}_threshold_exceeded",
            message=self._mensagem(metric, limite),
            severity=severidade,
            metric=metric,
            metadata={"threshold": limite},
        )

    @staticmethod
    def _mensagem(metric: Metric, limite: float) -> str:
        endpoint = metric.endpoint or "desconhecido"
        if metric.type == MetricType.RESPONSE_TIME:
            return (
                f"Tempo de resposta elevado ({metric.value}ms) para o endpoint "
                f"{endpoint}. Limite: {limite}ms."
            )
        if metric.type == MetricType.ERROR_RATE:
            return (
                f"Taxa de erro elevada ({metric.value * 100:.2f}%) para o endpoint "
                f"{endpoint}. Limite: {limite * 100:.2f}%."
            )
        if metric.type == MetricType.CACHE_HIT_RATE:
            return (
                f"Taxa de acerto de cache baixa ({metric.value * 100:.2f}%). "
                f"Limite mínimo: {limite * 100:.2f}%."
            )
        if metric.type == MetricType.DATABASE_QUERY_TIME:
            return (
                f"Tempo de consulta ao banco de dados elevado ({metric.value}ms). "
                f"Limite: {limite}ms."
            )
        if metric.type == MetricType.MEMORY_USAGE:
            return (
                f"Uso de memória elevado ({metric.value * 100:.2f}%). "
                f"Limite: {limite * 100:.2f}%."
            )
        return f"Uso de CPU elevado ({metric.value * 100:.2f}%). Limite: {limite * 100:.2f}%."

    def get_metric_stats(
        self,
        metric_type: MetricType,
        inicio: datetime,
        fim: datetime,
        endpoint: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Estatísticas da métrica no período.

        Período sem medições retorna contagem e estatísticas zeradas.

        Raises:
            ValidationError: Se fim for anterior ao início
        """
        if fim < inicio:
            raise ValidationError(
                "Data final deve ser posterior à data inicial", field="end_date"
            )
        metricas = self.repository.list_metrics(metric_type, inicio, fim, endpoint)
        valores = [m.value for m in metricas]
        if not valores:
            return {"count": 0, "min": 0, "max": 0, "avg": 0, "p95": 0, "p99": 0}
        return {
            "count": len(valores),
            "min": min(valores),
            "max": max(valores),
            "avg": sum(valores) / len(valores),
            "p95": percentil(valores, 95),
            "p99": percentil(valores, 99),
        }

    def list_alerts(self, limit: int = 50, severity: Optional[str] = None) -> List[Dict[str, Any]]:
        if severity and severity not in [s.value for s in Severity]:
            raise ValidationError(f"Severidade inválida: {severity}", field="severity")
        return [a.to_dict() for a in self.repository.list_alerts(limit=limit, severity=severity)]
