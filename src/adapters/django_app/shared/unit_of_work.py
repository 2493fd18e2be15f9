"""
Unit of Work - Implementação Django.

Gerencia transações atômicas entre múltiplos repositórios
(matrícula + parcelas + desconto na mesma transação).

Responsabilidades:
- Abrir/fechar bloco ``transaction.atomic()``
- Commit/Rollback coordenado
- Persistir eventos no Event Store dentro da transação
- Publicar eventos após commit bem-sucedido

O bloco atômico é aberto manualmente (``__enter__``/``__exit__``),
o que permite aninhar o UoW em transações externas (testes com
pytest-django, views com ATOMIC_REQUESTS) usando savepoints.
"""

from typing import Dict, Optional
import logging

from django.db import transaction

from src.core.shared.interfaces import EventPublisher, EventStore, UnitOfWork

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Eventos são gravados no Event Store antes do commit e publicados
    apenas depois dele. Falha ao publicar não desfaz a operação.

    Example:
        with DjangoUnitOfWork(event_publisher=publisher) as uow:
            matricula_repo.save(matricula)
            pagamento_repo.save_many(parcelas)
            uow.publish_event(MatriculaCriadaEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            repo.save(entity)
            raise ValidationError("...")
        # Rollback automático, eventos descartados
    """

    def __init__(
        self,
        event_publisher: Optional[EventPublisher] = None,
        event_store: Optional[EventStore] = None,
    ):
        super().__init__()
        self._event_publisher = event_publisher
        self._event_store = event_store
        self._atomic = None
        self._sequence_counters: Dict[str, int] = {}

    def _begin_transaction(self) -> None:
        if self._atomic is not None:
            raise RuntimeError("Unit of Work já está em uso")
        self._sequence_counters = {}
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Persiste as mudanças e publica eventos.

        Ordem de execução:
        1. Gravar eventos no Event Store (dentro da transação)
        2. Fechar o bloco atômico
        3. Publicar eventos
        """
        if self._atomic is None:
            logger.warning("Commit sem transação ativa")
            return

        try:
            if self._event_store and self._events:
                self._persist_events()
        except Exception as e:
            logger.error(f"Falha ao gravar eventos: {e}")
            self.rollback()
            raise

        atomic, self._atomic = self._atomic, None
        atomic.__exit__(None, None, None)
        logger.debug("Transaction committed")

        if self._events:
            self._publish_events()

    def rollback(self) -> None:
        """Desfaz as mudanças e descarta eventos."""
        if self._atomic is None:
            self.clear_events()
            return

        atomic, self._atomic = self._atomic, None
        try:
            atomic.__exit__(Exception, Exception("rollback"), None)
            logger.debug("Transaction rolled back")
        finally:
            self.clear_events()

    def _persist_events(self) -> None:
        for event in self._events:
            self._event_store.append(
                event=event,
                sequence=self._get_next_sequence(event.aggregate_id),
            )

    def _publish_events(self) -> None:
        """Publica eventos; falhas são logadas e não propagadas."""
        events, self._events = list(self._events), []
        for event in events:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )
            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    logger.error(f"Failed to publish event: {e}")

    def _get_next_sequence(self, aggregate_id: str) -> int:
        if aggregate_id not in self._sequence_counters:
            ultimo = self._event_store.last_sequence(aggregate_id) if self._event_store else 0
            self._sequence_counters[aggregate_id] = ultimo
        self._sequence_counters[aggregate_id] += 1
        return self._sequence_counters[aggregate_id]
