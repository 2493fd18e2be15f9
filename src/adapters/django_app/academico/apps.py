from django.apps import AppConfig


class AcademicoConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.academico'
    label = 'academico'
    verbose_name = 'Cadastro Acadêmico'
