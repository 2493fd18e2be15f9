"""
Mappers de auditoria: eventos, logs de transação, métricas, alertas e
feedback.
"""

from typing import Optional

from src.core.monitoramento.entities import (
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
from src.core.seguranca.entities import TransactionLogEntry, TransactionStatus, TransactionType
from src.core.shared.events import DomainEvent

from ..shared.repository import do_banco, para_banco
from .models import (
    AlertModel,
    DomainEventModel,
    FeedbackModel,
    MetricModel,
    TransactionLogModel,
)


class DomainEventMapper:
    """Usado apenas na escrita; a leitura devolve dicts."""

    @staticmethod
    def to_model(
        event: DomainEvent,
        sequence: int = 0,
        correlation_id: Optional[str] = None,
        causation_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> DomainEventModel:
        return DomainEventModel(
            event_id=event.event_id,
            event_type=event.event_type,
            aggregate_type=event.aggregate_type,
            aggregate_id=event.aggregate_id,
            event_data=event._get_event_data(),
            version=event.version,
            sequence=sequence,
            occurred_at=para_banco(event.occurred_at),
            correlation_id=correlation_id,
            causation_id=causation_id,
            user_id=user_id,
        )

    @staticmethod
    def to_dict(model: DomainEventModel) -> dict:
        return {
            'event_id': model.event_id,
            'event_type': model.event_type,
            'aggregate_type': model.aggregate_type,
            'aggregate_id': model.aggregate_id,
            'event_data': model.event_data,
            'sequence': model.sequence,
            'occurred_at': do_banco(model.occurred_at),
        }


class TransactionLogMapper:
    @staticmethod
    def to_model(entry: TransactionLogEntry) -> TransactionLogModel:
        return TransactionLogModel(
            id=entry.id,
            transaction_id=entry.transaction_id,
            transaction_type=entry.transaction_type.value,
            status=entry.status.value,
            user_id=entry.user_id,
            ip_address=entry.ip_address,
            user_agent=(entry.user_agent or '')[:500] or None,
            details=entry.details,
            created_at=para_banco(entry.created_at),
        )

    @staticmethod
    def to_entity(model: TransactionLogModel) -> TransactionLogEntry:
        return TransactionLogEntry(
            id=model.id,
            transaction_id=model.transaction_id,
            transaction_type=TransactionType(model.transaction_type),
            status=TransactionStatus(model.status),
            user_id=model.user_id,
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            details=model.details or {},
            created_at=do_banco(model.created_at),
        )


class MetricMapper:
    @staticmethod
    def to_model(metric: Metric) -> MetricModel:
        return MetricModel(
            id=metric.id,
            type=metric.type.value,
            value=metric.value,
            endpoint=metric.endpoint,
            user_id=metric.user_id,
            metadata=metric.metadata,
            timestamp=para_banco(metric.timestamp),
        )

    @staticmethod
    def to_entity(model: MetricModel) -> Metric:
        return Metric(
            id=model.id,
            type=MetricType(model.type),
            value=model.value,
            endpoint=model.endpoint,
            user_id=model.user_id,
            metadata=model.metadata or {},
            timestamp=do_banco(model.timestamp),
        )


class AlertMapper:
    @staticmethod
    def to_model(alert: Alert) -> AlertModel:
        return AlertModel(
            id=alert.id,
            type=alert.type,
            message=alert.message,
            severity=alert.severity.value,
            metric_id=alert.metric.id if alert.metric else None,
            metadata=alert.metadata,
            timestamp=para_banco(alert.timestamp),
        )

    @staticmethod
    def to_entity(model: AlertModel) -> Alert:
        return Alert(
            id=model.id,
            type=model.type,
            message=model.message,
            severity=Severity(model.severity),
            metric=MetricMapper.to_entity(model.metric) if model.metric_id else None,
            metadata=model.metadata or {},
            timestamp=do_banco(model.timestamp),
        )


class FeedbackMapper:
    @staticmethod
    def to_model(feedback: Feedback) -> FeedbackModel:
        return FeedbackModel(
            id=feedback.id,
            user_id=feedback.user_id,
            type=feedback.type.value,
            message=feedback.message,
            satisfaction_level=(
                feedback.satisfaction_level.value if feedback.satisfaction_level else None
            ),
            module=feedback.module,
            feature=feedback.feature,
            metadata=feedback.metadata,
            status=feedback.status.value,
            priority=feedback.priority.value,
            tags=feedback.tags,
            created_at=para_banco(feedback.created_at),
        )

    @staticmethod
    def to_entity(model: FeedbackModel) -> Feedback:
        return Feedback(
            id=model.id,
            user_id=model.user_id,
            type=FeedbackType(model.type),
            message=model.message,
            satisfaction_level=(
                SatisfactionLevel(model.satisfaction_level)
                if model.satisfaction_level is not None else None
            ),
            module=model.module,
            feature=model.feature,
            metadata=model.metadata or {},
            status=FeedbackStatus(model.status),
            priority=FeedbackPriority(model.priority),
            tags=list(model.tags or []),
            created_at=do_banco(model.created_at),
        )
