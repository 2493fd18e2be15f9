"""
Rotas de auditoria, LGPD e monitoramento (montadas em ``/api/``).
"""

from django.urls import path

from . import api_views

app_name = 'auditoria'

urlpatterns = [
    path('lgpd/consentimentos/', api_views.ConsentimentoAPIView.as_view(), name='consentimentos'),
    path('lgpd/consentimentos/<str:user_id>/', api_views.ConsentimentoDetailAPIView.as_view(), name='consentimento_detail'),
    path('lgpd/esquecimento/<str:aluno_id>/', api_views.EsquecimentoAPIView.as_view(), name='esquecimento'),
    path('lgpd/logs/<str:user_id>/', api_views.TransactionLogsAPIView.as_view(), name='transaction_logs'),
    path('monitoring/metrics', api_views.MetricasAPIView.as_view(), name='metrics'),
    path('monitoring/alerts', api_views.AlertasAPIView.as_view(), name='alerts'),
    path('feedback/', api_views.FeedbackAPIView.as_view(), name='feedback'),
    path('feedback/stats/', api_views.FeedbackStatsAPIView.as_view(), name='feedback_stats'),
    path('feedback/<str:feedback_id>/', api_views.FeedbackDetailAPIView.as_view(), name='feedback_detail'),
]
