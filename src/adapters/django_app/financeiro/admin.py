"""
Django Admin do domínio Financeiro.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import (
    DescontoModel,
    NegociacaoModel,
    PagamentoModel,
    SplitPagamentoModel,
    TransacaoFinanceiraModel,
)

STATUS_CORES = {
    'pendente': '#ffc107',
    'pago': '#28a745',
    'atrasado': '#dc3545',
    'cancelado': '#343a40',
    'reembolsado': '#6c757d',
    'aprovada': '#17a2b8',
    'concluida': '#28a745',
    'rejeitada': '#dc3545',
    'cancelada': '#343a40',
}


def _badge(status: str):
    return format_html(
        '<span style="background-color: {}; color: white; padding: 3px 8px; '
        'border-radius: 3px; font-size: 11px;">{}</span>',
        STATUS_CORES.get(status, '#6c757d'),
        status,
    )


class SplitInline(admin.TabularInline):
    model = SplitPagamentoModel
    extra = 0
    fields = ['recipient_id', 'recipient_type', 'amount', 'percentage', 'status']


@admin.register(PagamentoModel)
class PagamentoAdmin(admin.ModelAdmin):
    list_display = ['matricula', 'numero_parcela', 'valor', 'data_vencimento', 'status_badge', 'forma_pagamento', 'data_pagamento']
    list_filter = ['status', 'forma_pagamento', 'data_vencimento']
    search_fields = ['id', 'matricula__id', 'matricula__aluno__nome', 'gateway_id']
    readonly_fields = ['id', 'gateway_data', 'criado_em', 'atualizado_em']
    list_select_related = ['matricula__aluno']
    inlines = [SplitInline]
    date_hierarchy = 'data_vencimento'

    def status_badge(self, obj):
        return _badge(obj.status)
    status_badge.short_description = 'Status'


@admin.register(DescontoModel)
class DescontoAdmin(admin.ModelAdmin):
    list_display = ['codigo', 'nome', 'tipo', 'valor', 'usos', 'limite_usos', 'ativo', 'data_fim']
    list_filter = ['tipo', 'ativo']
    search_fields = ['codigo', 'nome']


@admin.register(NegociacaoModel)
class NegociacaoAdmin(admin.ModelAdmin):
    list_display = ['id', 'aluno_id', 'status_badge', 'valor_original', 'valor_negociado', 'numero_parcelas', 'criado_em']
    list_filter = ['status']
    search_fields = ['id', 'aluno_id', 'matricula_id']
    readonly_fields = ['pagamento_ids', 'criado_em', 'atualizado_em']

    def status_badge(self, obj):
        return _badge(obj.status)
    status_badge.short_description = 'Status'


@admin.register(TransacaoFinanceiraModel)
class TransacaoFinanceiraAdmin(admin.ModelAdmin):
    list_display = ['criado_em', 'type', 'amount', 'reference_type', 'reference_id', 'status', 'payment_method']
    list_filter = ['type', 'status', 'payment_method']
    search_fields = ['reference_id', 'description']
    date_hierarchy = 'criado_em'

    def has_change_permission(self, request, obj=None):
        return False
