"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Despachar Domain Events (notificações de matrícula, documentos, pagamentos)
- Tarefas agendadas (pagamentos vencidos, lembretes, limpeza de eventos)
- Relatórios financeiros enviados por e-mail

Uso:
    # Iniciar worker
    celery -A src.config.celery worker -l INFO

    # Iniciar beat (tarefas agendadas)
    celery -A src.config.celery beat -l INFO
"""

import os

from celery import Celery
from celery.schedules import crontab
from kombu import Exchange, Queue

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

app = Celery('matriculas')

# Lê as chaves CELERY_* de settings.py
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    timezone='America/Sao_Paulo',
    worker_send_task_events=True,
    task_send_sent_event=True,
)

HANDLERS = 'src.adapters.django_app.events.handlers'

app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('notifications', Exchange('notifications'), routing_key='notifications.#'),
    Queue('reports', Exchange('reports'), routing_key='reports.#'),
)
app.conf.task_default_queue = 'default'

app.conf.task_routes = {
    f'{HANDLERS}.dispatch_domain_event': {'queue': 'events'},
    f'{HANDLERS}.cleanup_old_events': {'queue': 'events'},
    f'{HANDLERS}.enviar_notificacao': {'queue': 'notifications'},
    f'{HANDLERS}.enviar_lembretes_pagamento': {'queue': 'notifications'},
    f'{HANDLERS}.enviar_relatorio_financeiro': {'queue': 'reports'},
}

app.autodiscover_tasks(['src.adapters.django_app.events'], related_name='handlers')

app.conf.beat_schedule = {
    # Marca parcelas vencidas todo dia às 6h
    'verificar-pagamentos-vencidos': {
        'task': f'{HANDLERS}.verificar_pagamentos_vencidos',
        'schedule': crontab(hour=6, minute=0),
    },

    # Lembretes de vencimento às 9h
    'enviar-lembretes-pagamento': {
        'task': f'{HANDLERS}.enviar_lembretes_pagamento',
        'schedule': crontab(hour=9, minute=0),
        'kwargs': {'dias_antes': int(os.environ.get('LEMBRETE_DIAS_ANTES', 3))},
    },

    # Limpar eventos antigos semanalmente
    'cleanup-old-events': {
        'task': f'{HANDLERS}.cleanup_old_events',
        'schedule': crontab(hour=3, minute=0, day_of_week='sunday'),
    },
}
