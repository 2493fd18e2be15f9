"""
Interfaces (Ports) - contratos entre Core e Adapters.

Ports da Arquitetura Hexagonal compartilhados por todos os domínios:
- UnitOfWork: transação atômica + fila de eventos
- Repository: operações básicas de persistência
- EventPublisher / EventStore: distribuição e histórico de eventos
- FileStorage: armazenamento de arquivos (documentos e contratos)

Princípio: Core define interfaces; Adapters implementam.
"""

from abc import ABC, abstractmethod
from typing import Dict, Generic, List, Optional, Protocol, TypeVar, runtime_checkable

from .events import DomainEvent


T = TypeVar("T")


class UnitOfWork(ABC):
    """
    Unit of Work - coordena transações atômicas.

    Pattern: Context Manager
        with uow:
            matricula_repo.save(matricula)
            pagamento_repo.save_many(parcelas)
            uow.publish_event(evento)
        # Commit ao sair sem erro; rollback se exceção

    Eventos enfileirados só são publicados após commit bem-sucedido.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    @abstractmethod
    def _begin_transaction(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """Persiste mudanças e publica eventos enfileirados."""
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz mudanças e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """
        Enfileira evento para publicação após commit.

        Args:
            event: Evento de domínio a ser publicado
        """
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Retorna eventos enfileirados (testing/debugging)."""
        return list(self._events)

    def clear_events(self) -> None:
        """Limpa fila de eventos."""
        self._events.clear()


class Repository(Protocol, Generic[T]):
    """
    Interface genérica para repositórios.

    Usando Protocol: adapters não precisam herdar explicitamente.
    """

    def save(self, entity: T) -> None:
        ...

    def get_by_id(self, entity_id: str) -> Optional[T]:
        ...

    def delete(self, entity_id: str) -> None:
        ...

    def list_all(self) -> List[T]:
        ...


class EventPublisher(ABC):
    """Interface para publicação de eventos (Celery, log, memória)."""

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError

    @abstractmethod
    def publish_batch(self, events: List[DomainEvent]) -> None:
        raise NotImplementedError


class EventStore(ABC):
    """
    Interface para persistência do histórico de eventos.

    Usada para auditoria das operações de matrícula e financeiro.
    """

    @abstractmethod
    def append(self, event: DomainEvent, sequence: int = 0) -> None:
        """
        Adiciona evento ao store.

        Args:
            event: Evento a ser persistido
            sequence: Posição do evento no agregado
        """
        raise NotImplementedError

    @abstractmethod
    def get_events_for_aggregate(self, aggregate_id: str) -> List[Dict]:
        """Recupera eventos de um agregado em ordem de sequência."""
        raise NotImplementedError

    @abstractmethod
    def last_sequence(self, aggregate_id: str) -> int:
        """Última sequência gravada para o agregado (0 se nenhuma)."""
        raise NotImplementedError


@runtime_checkable
class FileStorage(Protocol):
    """
    Port para armazenamento de arquivos.

    Os caminhos seguem o formato ``<bucket>/<nome>``, por exemplo
    ``matricula_documentos/<matricula_id>/rg_1700000000.pdf``.
    """

    def save(self, path: str, content: bytes) -> str:
        """
        Grava conteúdo e retorna a URL pública do arquivo.

        Args:
            path: Caminho desejado (bucket + nome)
            content: Bytes do arquivo

        Returns:
            URL para acesso ao arquivo
        """
        ...

    def read(self, path: str) -> bytes:
        ...

    def exists(self, path: str) -> bool:
        ...


class InMemoryFileStorage:
    """FileStorage em memória para testes."""

    def __init__(self, base_url: str = "memory://"):
        self.base_url = base_url
        self.arquivos: Dict[str, bytes] = {}

    def save(self, path: str, content: bytes) -> str:
        self.arquivos[path] = content
        return f"{self.base_url}{path}"

    def read(self, path: str) -> bytes:
        return self.arquivos[path]

    def exists(self, path: str) -> bool:
        return path in self.arquivos
