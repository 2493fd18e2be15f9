from django.apps import AppConfig


class MatriculasConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.matriculas'
    label = 'matriculas'
    verbose_name = 'Matrículas'
