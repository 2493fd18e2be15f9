"""
URL Configuration do portal de matrículas.

Estrutura:
- /admin/ - Django Admin
- /academico/ - Alunos e cursos (HTML + API)
- /matriculas/ - Matrículas, documentos e contratos (HTML + API)
- /financeiro/ - Dashboard, descontos, pagamentos e negociações
- /api/ - Integrações (pagamentos, cron, relatórios, webhooks), LGPD e monitoramento
- /health/ - Health check
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView

from src.adapters.django_app.auditoria.api_views import HealthCheckView

urlpatterns = [
    path('', RedirectView.as_view(pattern_name='matriculas:list', permanent=False)),

    path('admin/', admin.site.urls),

    path('academico/', include('src.adapters.django_app.academico.urls')),
    path('matriculas/', include('src.adapters.django_app.matriculas.urls')),
    path('financeiro/', include('src.adapters.django_app.financeiro.urls')),

    path('api/', include('src.adapters.django_app.financeiro.api_urls')),
    path('api/', include('src.adapters.django_app.auditoria.urls')),

    path('health/', HealthCheckView.as_view(), name='health'),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
