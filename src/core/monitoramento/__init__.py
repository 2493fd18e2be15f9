"""
Domínio de Monitoramento - métricas de desempenho, alertas e feedback
dos usuários.
"""

from .entities import (
    Alert,
    Feedback,
    FeedbackPriority,
    FeedbackStatus,
    FeedbackType,
    Metric,
    MetricType,
    SatisfactionLevel,
    Severity,
)
from .feedback import FeedbackService, extrair_palavras_chave
from .ports import Contador, FeedbackFilters, FeedbackRepository, MetricRepository
from .services import LIMITES_PADRAO, MonitoringService, percentil

__all__ = [
    "Alert",
    "Metric",
    "MetricType",
    "Severity",
    "Feedback",
    "FeedbackPriority",
    "FeedbackStatus",
    "FeedbackType",
    "SatisfactionLevel",
    "Contador",
    "MetricRepository",
    "FeedbackFilters",
    "FeedbackRepository",
    "LIMITES_PADRAO",
    "MonitoringService",
    "FeedbackService",
    "extrair_palavras_chave",
    "percentil",
]
