"""
Django Admin de auditoria. Registros são somente leitura.
"""

from django.contrib import admin

from .models import AlertModel, DomainEventModel, FeedbackModel, MetricModel, TransactionLogModel


class SomenteLeituraAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(DomainEventModel)
class DomainEventAdmin(SomenteLeituraAdmin):
    list_display = ['event_type', 'aggregate_type', 'aggregate_id', 'sequence', 'occurred_at']
    list_filter = ['event_type', 'aggregate_type']
    search_fields = ['aggregate_id', 'event_id', 'correlation_id']
    date_hierarchy = 'occurred_at'


@admin.register(TransactionLogModel)
class TransactionLogAdmin(SomenteLeituraAdmin):
    list_display = ['created_at', 'transaction_type', 'status', 'transaction_id', 'user_id', 'ip_address']
    list_filter = ['transaction_type', 'status']
    search_fields = ['transaction_id', 'user_id']
    date_hierarchy = 'created_at'


@admin.register(MetricModel)
class MetricAdmin(SomenteLeituraAdmin):
    list_display = ['timestamp', 'type', 'value', 'endpoint']
    list_filter = ['type']
    search_fields = ['endpoint']


@admin.register(AlertModel)
class AlertAdmin(SomenteLeituraAdmin):
    list_display = ['timestamp', 'severity', 'type', 'message']
    list_filter = ['severity', 'type']


@admin.register(FeedbackModel)
class FeedbackAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'type', 'module', 'priority', 'status', 'satisfaction_level', 'user_id']
    list_filter = ['type', 'status', 'priority', 'module']
    search_fields = ['message', 'feature', 'user_id']
    readonly_fields = ['id', 'user_id', 'type', 'message', 'satisfaction_level', 'module', 'feature', 'metadata', 'tags', 'created_at']
    date_hierarchy = 'created_at'
