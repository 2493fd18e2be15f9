"""
URL patterns do domínio de Matrículas.

Rotas fixas (``nova/``, ``api/``, ``documentos/``, ``contratos/``) vêm
antes de ``<pk>/`` para não conflitar.
"""

from django.urls import path

from . import api_views, views

app_name = 'matriculas'

urlpatterns = [
    # HTML
    path('', views.MatriculaListView.as_view(), name='list'),
    path('nova/', views.MatriculaCreateView.as_view(), name='create'),
    path('documentos/<str:pk>/avaliar/', views.DocumentoAvaliarView.as_view(), name='documento_avaliar'),
    path('contratos/<str:pk>/assinar/', views.ContratoAssinarView.as_view(), name='contrato_assinar'),
    path('contratos/<str:pk>/download/', views.ContratoDownloadView.as_view(), name='contrato_download'),

    # API JSON
    path('api/', api_views.MatriculaAPIListView.as_view(), name='api_list'),
    path('api/documentos/<str:pk>/avaliar/', api_views.DocumentoAPIAvaliarView.as_view(), name='api_documento_avaliar'),
    path('api/contratos/<str:pk>/assinar/', api_views.ContratoAPIAssinarView.as_view(), name='api_contrato_assinar'),
    path('api/<str:pk>/', api_views.MatriculaAPIDetailView.as_view(), name='api_detail'),
    path('api/<str:pk>/status/', api_views.MatriculaAPIStatusView.as_view(), name='api_status'),
    path('api/<str:pk>/documentos/', api_views.DocumentoAPIListView.as_view(), name='api_documentos'),
    path('api/<str:pk>/contrato/', api_views.ContratoAPIView.as_view(), name='api_contrato'),

    # HTML por matrícula
    path('<str:pk>/', views.MatriculaDetailView.as_view(), name='detail'),
    path('<str:pk>/status/', views.MatriculaStatusView.as_view(), name='status'),
    path('<str:pk>/documentos/', views.DocumentoUploadView.as_view(), name='documento_upload'),
    path('<str:pk>/contrato/', views.ContratoGerarView.as_view(), name='contrato_gerar'),
]
