"""
Rotas de integração do Financeiro, montadas na raiz ``/api/``.
"""

from django.urls import path

from . import api_views

app_name = 'api_financeiro'

urlpatterns = [
    path('payments/process', api_views.ProcessarPagamentoAPIView.as_view(), name='payments_process'),
    path('cron/overdue-payments', api_views.CronPagamentosVencidosAPIView.as_view(), name='cron_overdue'),
    path('reports/financial', api_views.RelatorioFinanceiroAPIView.as_view(), name='reports_financial'),
    path('webhooks/payments', api_views.WebhookPagamentosAPIView.as_view(), name='webhooks_payments'),
    path('dashboard/financial-summary', api_views.ResumoFinanceiroAPIView.as_view(), name='financial_summary'),
]
