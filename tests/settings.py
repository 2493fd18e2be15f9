"""
Settings de teste.

Banco SQLite em memória, cache local, eventos em memória e tarefas
Celery executadas de forma síncrona.
"""

import tempfile
from pathlib import Path

from src.config.settings import *  # noqa: F401,F403
from src.config.settings import MIDDLEWARE

DEBUG = False
SECRET_KEY = 'chave-secreta-de-teste'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'matriculas-testes',
    }
}

# Métricas da API são testadas diretamente no middleware
MIDDLEWARE = [m for m in MIDDLEWARE if not m.endswith('MetricsMiddleware')]

EVENT_PUBLISHER_MODE = 'memory'
PAYMENT_GATEWAY_MODE = 'simulado'

ENCRYPTION_KEY = 'chave-de-criptografia-de-teste'
CRON_SECRET = 'cron-secret-teste'
REPORT_SECRET = 'report-secret-teste'
WEBHOOK_SECRET = 'webhook-secret-teste'

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

MEDIA_ROOT = Path(tempfile.mkdtemp(prefix='matriculas-media-'))
