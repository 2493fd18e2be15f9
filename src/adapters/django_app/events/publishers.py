"""
Event Publishers - Publicadores de Eventos de Domínio.

Implementações:
- LoggingEventPublisher: apenas loga (desenvolvimento); pode executar
  o dispatcher de notificações de forma síncrona
- CeleryEventPublisher: publica via Celery (produção)
- InMemoryEventPublisher: para testes

Chamado pelo Unit of Work depois do commit.
"""

from typing import Callable, Dict, List
import json
import logging

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)


class LoggingEventPublisher(EventPublisher):
    """
    Publisher que loga eventos.

    Com ``dispatch_sync=True`` executa o dispatcher de notificações no
    próprio processo, sem broker.
    """

    def __init__(self, log_level: int = logging.INFO, dispatch_sync: bool = False):
        self._log_level = log_level
        self._dispatch_sync = dispatch_sync

    def publish(self, event: DomainEvent) -> None:
        event_data = event.to_dict()
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event_data['data'], default=str)}"
        )

        if self._dispatch_sync:
            try:
                from src.adapters.django_app.events.handlers import dispatch_domain_event
                dispatch_domain_event.apply(args=(event.event_type, event_data))
            except Exception as e:
                logger.warning(f"Falha ao despachar {event.event_type}: {e}")

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


class CeleryEventPublisher(EventPublisher):
    """Publisher que envia eventos para a fila ``events`` do Celery."""

    def __init__(self, also_log: bool = True):
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )

        try:
            from src.adapters.django_app.events.handlers import dispatch_domain_event
            dispatch_domain_event.delay(event.event_type, event.to_dict())
        except Exception as e:
            # Broker indisponível não desfaz a operação já confirmada
            logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


class InMemoryEventPublisher(EventPublisher):
    """
    Publisher em memória para testes.

    Example:
        publisher = InMemoryEventPublisher()
        publisher.register_handler("MatriculaCriadaEvent", handler)
    """

    def __init__(self):
        self._published_events: List[DomainEvent] = []
        self._handlers: Dict[str, List[Callable[[DomainEvent], None]]] = {}

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Erro em handler de teste: {e}")

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def clear(self) -> None:
        self._published_events.clear()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self._published_events if e.event_type == event_type]

    def register_handler(self, event_type: str, handler: Callable[[DomainEvent], None]) -> None:
        self._handlers.setdefault(event_type, []).append(handler)


def get_event_publisher(mode: str = "logging") -> EventPublisher:
    """
    Factory para obter publisher apropriado.

    Args:
        mode: ``celery``, ``sync`` (log + dispatcher síncrono),
            ``memory`` ou ``logging``
    """
    if mode == "celery":
        return CeleryEventPublisher()
    if mode == "sync":
        return LoggingEventPublisher(dispatch_sync=True)
    if mode == "memory":
        return InMemoryEventPublisher()
    return LoggingEventPublisher()
