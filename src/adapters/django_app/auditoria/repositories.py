"""
Repositórios de auditoria.

- DjangoEventStore: port EventStore (gravado pelo Unit of Work)
- DjangoTransactionLogRepository: port TransactionLogRepository
- DjangoMetricRepository: port MetricRepository
- DjangoFeedbackRepository: port FeedbackRepository
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from django.db.models import Max

from src.core.monitoramento.entities import Alert, Feedback, Metric, MetricType
from src.core.monitoramento.ports import FeedbackFilters
from src.core.seguranca.entities import TransactionLogEntry, TransactionType
from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventStore

from ..shared.repository import para_banco
from .mappers import (
    AlertMapper,
    DomainEventMapper,
    FeedbackMapper,
    MetricMapper,
    TransactionLogMapper,
)
from .models import (
    AlertModel,
    DomainEventModel,
    FeedbackModel,
    MetricModel,
    TransactionLogModel,
)

logger = logging.getLogger(__name__)


class DjangoEventStore(EventStore):
    """
    Event Store usando Django ORM.

    Grava dentro da transação do Unit of Work: rollback descarta os
    eventos junto com as mudanças.
    """

    def append(
        self,
        event: DomainEvent,
        sequence: int = 0,
        correlation_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> None:
        model = DomainEventMapper.to_model(
            event=event,
            sequence=sequence,
            correlation_id=correlation_id,
            user_id=user_id,
        )
        model.save()
        logger.debug(f"Event stored: {event.event_type} for {event.aggregate_id}")

    def get_events_for_aggregate(self, aggregate_id: str, since_sequence: int = 0) -> List[Dict[str, Any]]:
        eventos = (
            DomainEventModel.objects
            .filter(aggregate_id=aggregate_id, sequence__gte=since_sequence)
            .order_by('sequence')
        )
        return [DomainEventMapper.to_dict(e) for e in eventos]

    def last_sequence(self, aggregate_id: str) -> int:
        ultimo = DomainEventModel.objects.filter(aggregate_id=aggregate_id).aggregate(m=Max('sequence'))['m']
        return ultimo or 0


class DjangoTransactionLogRepository:
    def save(self, entry: TransactionLogEntry) -> None:
        TransactionLogMapper.to_model(entry).save()

    def list_by_user(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        transaction_type: Optional[TransactionType] = None,
    ) -> List[TransactionLogEntry]:
        qs = TransactionLogModel.objects.filter(user_id=user_id)
        if transaction_type:
            qs = qs.filter(transaction_type=transaction_type.value)
        qs = qs.order_by('-created_at')[offset:offset + limit]
        return [TransactionLogMapper.to_entity(m) for m in qs]


class DjangoMetricRepository:
    def save_metric(self, metric: Metric) -> None:
        MetricMapper.to_model(metric).save()

    def save_alert(self, alert: Alert) -> None:
        AlertMapper.to_model(alert).save()

    def list_metrics(
        self,
        metric_type: MetricType,
        inicio: datetime,
        fim: datetime,
        endpoint: Optional[str] = None,
    ) -> List[Metric]:
        qs = MetricModel.objects.filter(
            type=metric_type.value,
            timestamp__gte=para_banco(inicio),
            timestamp__lte=para_banco(fim),
        )
        if endpoint:
            qs = qs.filter(endpoint=endpoint)
        return [MetricMapper.to_entity(m) for m in qs.order_by('timestamp')]

    def list_alerts(self, limit: int = 50, severity: Optional[str] = None) -> List[Alert]:
        qs = AlertModel.objects.select_related('metric')
        if severity:
            qs = qs.filter(severity=severity)
        return [AlertMapper.to_entity(m) for m in qs.order_by('-timestamp')[:limit]]


class DjangoFeedbackRepository:
    def save(self, feedback: Feedback) -> None:
        model = FeedbackMapper.to_model(feedback)
        defaults = {
            f.attname: getattr(model, f.attname)
            for f in model._meta.concrete_fields
            if not f.primary_key
        }
        FeedbackModel.objects.update_or_create(id=feedback.id, defaults=defaults)

    def get_by_id(self, feedback_id: str) -> Optional[Feedback]:
        model = FeedbackModel.objects.filter(id=feedback_id).first()
        return FeedbackMapper.to_entity(model) if model else None

    def buscar(self, filters: FeedbackFilters) -> List[Feedback]:
        qs = FeedbackModel.objects.all()
        if filters.type:
            qs = qs.filter(type=filters.type.value)
        if filters.module:
            qs = qs.filter(module=filters.module)
        if filters.feature:
            qs = qs.filter(feature=filters.feature)
        if filters.status:
            qs = qs.filter(status=filters.status.value)
        if filters.priority:
            qs = qs.filter(priority=filters.priority.value)
        if filters.start_date:
            qs = qs.filter(created_at__gte=para_banco(filters.start_date))
        if filters.end_date:
            qs = qs.filter(created_at__lte=para_banco(filters.end_date))
        if filters.user_id:
            qs = qs.filter(user_id=filters.user_id)
        return [FeedbackMapper.to_entity(m) for m in qs.order_by('-created_at')]
