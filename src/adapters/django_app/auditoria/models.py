"""
Django Models de auditoria e monitoramento.

Tabelas:
- domain_events: Event Store (histórico de eventos de domínio)
- transaction_logs: trilha de auditoria (pagamentos, webhooks, LGPD)
- metricas / alertas: monitoramento de desempenho
- user_feedback: feedback dos usuários sobre o portal
"""

from django.db import models
from django.utils import timezone


class DomainEventModel(models.Model):
    """
    Event Store genérico para Domain Events.

    Eventos de matrícula, documentos, contratos e pagamentos ficam aqui
    para auditoria; ``cleanup_old_events`` remove os antigos.
    """

    event_id = models.CharField(max_length=36, primary_key=True, help_text="UUID único do evento")
    event_type = models.CharField(max_length=100, db_index=True, help_text="Ex: MatriculaCriadaEvent")
    aggregate_type = models.CharField(max_length=100, db_index=True, help_text="Ex: Matricula")
    aggregate_id = models.CharField(max_length=36, db_index=True)
    event_data = models.JSONField(default=dict)
    version = models.IntegerField(default=1, help_text="Versão do schema do evento")
    sequence = models.BigIntegerField(default=0, help_text="Sequência do evento no agregado")

    occurred_at = models.DateTimeField()
    recorded_at = models.DateTimeField(auto_now_add=True)

    correlation_id = models.CharField(max_length=36, null=True, blank=True, db_index=True)
    causation_id = models.CharField(max_length=36, null=True, blank=True)
    user_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)

    class Meta:
        db_table = 'domain_events'
        verbose_name = 'Evento de Domínio'
        verbose_name_plural = 'Eventos de Domínio'
        ordering = ['recorded_at']
        indexes = [
            models.Index(fields=['aggregate_id', 'sequence'], name='idx_event_aggregate_seq'),
            models.Index(fields=['event_type', 'recorded_at'], name='idx_event_type_recorded'),
        ]

    def __str__(self):
        return f"{self.event_type} - {self.aggregate_id[:8]} @ {self.occurred_at}"


class TransactionLogModel(models.Model):
    """
    Tabela: transaction_logs

    ``details`` já chega com campos sensíveis mascarados pelo
    TransactionLogger.
    """

    id = models.CharField(max_length=36, primary_key=True, editable=False)
    transaction_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    transaction_type = models.CharField(max_length=30, db_index=True)
    status = models.CharField(max_length=20)
    user_id = models.CharField(max_length=100, null=True, blank=True)
    ip_address = models.CharField(max_length=45, null=True, blank=True)
    user_agent = models.CharField(max_length=500, null=True, blank=True)
    details = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'transaction_logs'
        verbose_name = 'Log de transação'
        verbose_name_plural = 'Logs de transação'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user_id', 'created_at'], name='idx_txlog_user_created'),
        ]

    def __str__(self):
        return f"{self.transaction_type} {self.status} @ {self.created_at}"


class MetricModel(models.Model):
    id = models.CharField(max_length=36, primary_key=True, editable=False)
    type = models.CharField(max_length=30)
    value = models.FloatField()
    endpoint = models.CharField(max_length=255, null=True, blank=True)
    user_id = models.CharField(max_length=100, null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'metricas'
        verbose_name = 'Métrica'
        verbose_name_plural = 'Métricas'
        ordering = ['timestamp']
        indexes = [
            models.Index(fields=['type', 'timestamp'], name='idx_metrica_tipo_ts'),
        ]


class AlertModel(models.Model):
    id = models.CharField(max_length=36, primary_key=True, editable=False)
    type = models.CharField(max_length=60)
    message = models.TextField()
    severity = models.CharField(max_length=10, db_index=True)
    metric = models.ForeignKey(MetricModel, null=True, blank=True, on_delete=models.SET_NULL, related_name='alertas')
    metadata = models.JSONField(default=dict, blank=True)
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'alertas'
        verbose_name = 'Alerta'
        verbose_name_plural = 'Alertas'
        ordering = ['-timestamp']

    def __str__(self):
        return f"[{self.severity}] {self.type}"


class FeedbackModel(models.Model):
    id = models.CharField(max_length=36, primary_key=True, editable=False)
    user_id = models.CharField(max_length=100, db_index=True)
    type = models.CharField(max_length=30, db_index=True)
    message = models.TextField()
    satisfaction_level = models.PositiveSmallIntegerField(null=True, blank=True)
    module = models.CharField(max_length=100, db_index=True)
    feature = models.CharField(max_length=100, null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=20, default='pending', db_index=True)
    priority = models.CharField(max_length=10, default='low')
    tags = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'user_feedback'
        verbose_name = 'Feedback'
        verbose_name_plural = 'Feedbacks'
        ordering = ['-created_at']

    def __str__(self):
        return f"[{self.priority}] {self.type} - {self.module}"
