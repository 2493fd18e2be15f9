from django.apps import AppConfig


class AuditoriaConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.auditoria'
    label = 'auditoria'
    verbose_name = 'Auditoria e Monitoramento'
