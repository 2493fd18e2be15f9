"""
Ports de Monitoramento.

- MetricRepository: persistência de métricas e alertas
- Contador: contadores com expiração (requisições e erros por endpoint)
- FeedbackRepository: feedbacks dos usuários
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from .entities import (
    Alert,
    Feedback,
    FeedbackPriority,
    FeedbackStatus,
    FeedbackType,
    Metric,
    MetricType,
)


@runtime_checkable
class MetricRepository(Protocol):
    def save_metric(self, metric: Metric) -> None:
        ...

    def save_alert(self, alert: Alert) -> None:
        ...

    def list_metrics(
        self,
        metric_type: MetricType,
        inicio: datetime,
        fim: datetime,
        endpoint: Optional[str] = None,
    ) -> List[Metric]:
        ...

    def list_alerts(self, limit: int = 50, severity: Optional[str] = None) -> List[Alert]:
        """Alertas mais recentes primeiro."""
        ...


@runtime_checkable
class Contador(Protocol):
    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ...


@dataclass(frozen=True)
class FeedbackFilters:
    """Filtros combinados com E; None não filtra."""

    type: Optional[FeedbackType] = None
    module: Optional[str] = None
    feature: Optional[str] = None
    status: Optional[FeedbackStatus] = None
    priority: Optional[FeedbackPriority] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    user_id: Optional[str] = None

    def aceita(self, feedback: Feedback) -> bool:
        return (
            (self.type is None or feedback.type == self.type)
            and (self.module is None or feedback.module == self.module)
            and (self.feature is None or feedback.feature == self.feature)
            and (self.status is None or feedback.status == self.status)
            and (self.priority is None or feedback.priority == self.priority)
            and (self.start_date is None or feedback.created_at >= self.start_date)
            and (self.end_date is None or feedback.created_at <= self.end_date)
            and (self.user_id is None or feedback.user_id == self.user_id)
        )


@runtime_checkable
class FeedbackRepository(Protocol):
    def save(self, feedback: Feedback) -> None:
        ...

    def get_by_id(self, feedback_id: str) -> Optional[Feedback]:
        ...

    def buscar(self, filters: FeedbackFilters) -> List[Feedback]:
        """Mais recentes primeiro."""
        ...


class InMemoryMetricRepository:
    def __init__(self):
        self.metricas: List[Metric] = []
        self.alertas: List[Alert] = []

    def save_metric(self, metric: Metric) -> None:
        self.metricas.append(metric)

    def save_alert(self, alert: Alert) -> None:
        self.alertas.append(alert)

    def list_metrics(
        self,
        metric_type: MetricType,
        inicio: datetime,
        fim: datetime,
        endpoint: Optional[str] = None,
    ) -> List[Metric]:
        return [
            m for m in self.metricas
            if m.type == metric_type
            and inicio <= m.timestamp <= fim
            and (endpoint is None or m.endpoint == endpoint)
        ]

    def list_alerts(self, limit: int = 50, severity: Optional[str] = None) -> List[Alert]:
        alertas = [a for a in self.alertas if severity is None or a.severity.value == severity]
        return sorted(alertas, key=lambda a: a.timestamp, reverse=True)[:limit]


class DictContador:
    """Contador em memória, sem expiração (testes)."""

    def __init__(self):
        self._valores: Dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._valores.get(key, default)

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        self._valores[key] = value


class InMemoryFeedbackRepository:
    def __init__(self):
        self._feedbacks: Dict[str, Feedback] = {}

    def save(self, feedback: Feedback) -> None:
        self._feedbacks[feedback.id] = feedback

    def get_by_id(self, feedback_id: str) -> Optional[Feedback]:
        return self._feedbacks.get(feedback_id)

    def buscar(self, filters: FeedbackFilters) -> List[Feedback]:
        return sorted(
            (f for f in self._feedbacks.values() if filters.aceita(f)),
            key=lambda f: f.created_at,
            reverse=True,
        )
