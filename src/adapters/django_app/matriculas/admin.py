"""
Django Admin do domínio de Matrículas.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import ContratoModel, DocumentoModel, MatriculaModel

STATUS_CORES = {
    'pendente': '#ffc107',
    'aprovado': '#17a2b8',
    'ativo': '#28a745',
    'assinado': '#28a745',
    'trancado': '#6c757d',
    'rejeitado': '#dc3545',
    'cancelado': '#343a40',
    'concluido': '#007bff',
}


def _badge(status: str):
    return format_html(
        '<span style="background-color: {}; color: white; padding: 3px 8px; '
        'border-radius: 3px; font-size: 11px;">{}</span>',
        STATUS_CORES.get(status, '#6c757d'),
        status,
    )


class DocumentoInline(admin.TabularInline):
    model = DocumentoModel
    extra = 0
    fields = ['tipo', 'nome_arquivo', 'status', 'avaliado_por', 'avaliado_em']
    readonly_fields = ['avaliado_em']


@admin.register(MatriculaModel)
class MatriculaAdmin(admin.ModelAdmin):
    list_display = ['id_curto', 'aluno', 'curso', 'status_badge', 'valor_total', 'numero_parcelas', 'criado_em']
    list_filter = ['status', 'forma_pagamento', 'criado_em']
    search_fields = ['id', 'aluno__nome', 'aluno__email', 'curso__codigo']
    readonly_fields = ['id', 'metadata', 'criado_em', 'atualizado_em']
    list_select_related = ['aluno', 'curso']
    inlines = [DocumentoInline]
    date_hierarchy = 'criado_em'

    def id_curto(self, obj):
        return obj.id[:8] + '...'
    id_curto.short_description = 'ID'

    def status_badge(self, obj):
        return _badge(obj.status)
    status_badge.short_description = 'Status'


@admin.register(ContratoModel)
class ContratoAdmin(admin.ModelAdmin):
    list_display = ['titulo', 'matricula', 'status_badge', 'data_assinatura', 'assinado_por']
    list_filter = ['status']
    readonly_fields = ['id', 'assinatura_metadata', 'criado_em', 'atualizado_em']

    def status_badge(self, obj):
        return _badge(obj.status)
    status_badge.short_description = 'Status'
