from django.apps import AppConfig


class FinanceiroConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.financeiro'
    label = 'financeiro'
    verbose_name = 'Financeiro'
