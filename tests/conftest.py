"""
Configurações globais do Pytest para o Portal de Matrículas.

Este arquivo é carregado automaticamente pelo pytest e
fornece fixtures e configurações compartilhadas.
"""

from typing import List

import pytest

from src.core.shared.events import DomainEvent


class FakeUnitOfWork:
    """
    Fake Unit of Work para testes.

    Permite testar:
    - Comportamento de commit/rollback
    - Eventos publicados
    - Isolamento de transações
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self._committed = False
        self._rolled_back = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    def commit(self):
        self._committed = True

    def rollback(self):
        self._rolled_back = True
        self._events.clear()

    def publish_event(self, event: DomainEvent):
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        return list(self._events)

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back


@pytest.fixture
def uow():
    """Fixture para Unit of Work fake."""
    return FakeUnitOfWork()


@pytest.fixture(autouse=True)
def reset_singletons():
    """
    Reset de singletons entre testes.

    Container DI e cache service são recriados e o cache é limpo a cada teste.
    """
    yield
    from django.core.cache import cache

    from src.adapters.django_app.shared.cache import reset_cache_service
    from src.config.container import reset_container

    reset_container()
    reset_cache_service()
    cache.clear()


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: testes que percorrem container, banco e views"
    )
