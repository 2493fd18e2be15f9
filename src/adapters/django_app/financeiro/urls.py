"""
URL patterns do domínio Financeiro (``/financeiro/``).

As rotas de integração em ``/api/`` ficam em ``api_urls``.
"""

from django.urls import path

from . import api_views, views

app_name = 'financeiro'

urlpatterns = [
    # HTML
    path('', views.DashboardFinanceiroView.as_view(), name='dashboard'),
    path('descontos/', views.DescontoListView.as_view(), name='descontos'),
    path('pagamentos/<str:pk>/registrar/', views.PagamentoRegistrarView.as_view(), name='pagamento_registrar'),
    path('pagamentos/<str:pk>/cancelar/', views.PagamentoCancelarView.as_view(), name='pagamento_cancelar'),

    # API JSON
    path('api/pagamentos/', api_views.PagamentoAPIListView.as_view(), name='api_pagamentos'),
    path('api/pagamentos/<str:pk>/', api_views.PagamentoAPIDetailView.as_view(), name='api_pagamento_detail'),
    path('api/pagamentos/<str:pk>/registrar/', api_views.PagamentoAPIRegistrarView.as_view(), name='api_pagamento_registrar'),
    path('api/pagamentos/<str:pk>/cancelar/', api_views.PagamentoAPICancelarView.as_view(), name='api_pagamento_cancelar'),
    path('api/pagamentos/<str:pk>/split/', api_views.SplitAPIView.as_view(), name='api_split'),
    path('api/descontos/', api_views.DescontoAPIListView.as_view(), name='api_descontos'),
    path('api/descontos/validar/', api_views.DescontoAPIValidarView.as_view(), name='api_desconto_validar'),
    path('api/negociacoes/', api_views.NegociacaoAPIListView.as_view(), name='api_negociacoes'),
    path('api/negociacoes/<str:pk>/<str:acao>/', api_views.NegociacaoAPIDecisaoView.as_view(), name='api_negociacao_decisao'),
]
