"""
Entidades de Monitoramento.

- MetricType: tipos de métrica coletados
- Metric: uma medição
- Alert: limite ultrapassado
- Feedback: opinião do usuário sobre um módulo do portal
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid

from src.core.shared.exceptions import ValidationError


class MetricType(Enum):
    RESPONSE_TIME = "response_time"
    ERROR_RATE = "error_rate"
    API_USAGE = "api_usage"
    CACHE_HIT_RATE = "cache_hit_rate"
    DATABASE_QUERY_TIME = "database_query_time"
    MEMORY_USAGE = "memory_usage"
    CPU_USAGE = "cpu_usage"

    @classmethod
    def from_string(cls, value: str) -> "MetricType":
        for tipo in cls:
            if tipo.value == (value or "").strip().lower():
                return tipo
        raise ValidationError(f"Tipo de métrica inválido: {value}", field="type")


class Severity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class Metric:
    type: MetricType
    value: float
    timestamp: datetime = field(default_factory=datetime.now)
    endpoint: Optional[str] = None
    user_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "value": self.value,
            "timestamp": self.timestamp.isoformat(),
            "endpoint": self.endpoint,
            "user_id": self.user_id,
            "metadata": self.metadata,
        }


@dataclass
class Alert:
    """
    Alerta gerado quando uma métrica cruza o limite do seu tipo.

    ``type`` segue o formato ``{metric_type}_threshold_exceeded``.
    """

    type: str
    message: str
    severity: Severity
    metric: Optional[Metric] = None
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: Dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "message": self.message,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "metric_type": self.metric.type.value if self.metric else None,
            "metric_value": self.metric.value if self.metric else None,
            "endpoint": self.metric.endpoint if self.metric else None,
            "metadata": self.metadata,
        }


class FeedbackType(Enum):
    BUG = "bug"
    FEATURE_REQUEST = "feature_request"
    USABILITY = "usability"
    PERFORMANCE = "performance"
    GENERAL = "general"

    @classmethod
    def from_string(cls, value: str) -> "FeedbackType":
        for tipo in cls:
            if tipo.value == str(value or "").strip().lower():
                return tipo
        raise ValidationError(f"Tipo de feedback inválido: {value}", field="type")


class SatisfactionLevel(Enum):
    VERY_DISSATISFIED = 1
    DISSATISFIED = 2
    NEUTRAL = 3
    SATISFIED = 4
    VERY_SATISFIED = 5

    @classmethod
    def from_value(cls, value: Any) -> "SatisfactionLevel":
        if isinstance(value, bool):
            raise ValidationError("Nível de satisfação deve ser de 1 a 5", field="satisfactionLevel")
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise ValidationError("Nível de satisfação deve ser de 1 a 5", field="satisfactionLevel")


class FeedbackStatus(Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    IMPLEMENTED = "implemented"
    REJECTED = "rejected"

    @classmethod
    def from_string(cls, value: str) -> "FeedbackStatus":
        for status in cls:
            if status.value == str(value or "").strip().lower():
                return status
        raise ValidationError(f"Status de feedback inválido: {value}", field="status")


class FeedbackPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_string(cls, value: str) -> "FeedbackPriority":
        for prioridade in cls:
            if prioridade.value == str(value or "").strip().lower():
                return prioridade
        raise ValidationError(f"Prioridade inválida: {value}", field="priority")


@dataclass
class Feedback:
    user_id: str
    type: FeedbackType
    message: str
    module: str
    satisfaction_level: Optional[SatisfactionLevel] = None
    feature: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    status: FeedbackStatus = FeedbackStatus.PENDING
    priority: FeedbackPriority = FeedbackPriority.LOW
    tags: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "type": self.type.value,
            "message": self.message,
            "satisfaction_level": (
                self.satisfaction_level.value if self.satisfaction_level else None
            ),
            "module": self.module,
            "feature": self.feature,
            "metadata": self.metadata,
            "status": self.status.value,
            "priority": self.priority.value,
            "tags": self.tags,
            "created_at": self.created_at.isoformat(),
        }
