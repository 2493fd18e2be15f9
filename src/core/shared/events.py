"""
Domain Events - comunicação desacoplada entre domínios.

Eventos são enfileirados no Unit of Work, persistidos no Event Store
e publicados após o commit. Os handlers assíncronos (Celery) usam os
eventos para disparar notificações a alunos e secretaria.

Características:
- Auto-geração de ID e timestamp
- Serializáveis para JSON (Decimal, date e datetime convertidos)
- Rastreáveis via aggregate_id
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict
import uuid


def serializar_valor(value: Any) -> Any:
    """
    Converte valores de domínio em tipos aceitos por JSON.

    Decimal vira string (sem perda de centavos), date/datetime viram
    ISO 8601. Listas e dicionários são convertidos recursivamente.
    """
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: serializar_valor(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serializar_valor(v) for v in value]
    return value


@dataclass
class DomainEvent(ABC):
    """
    Classe base abstrata para Domain Events.

    Nomeados no passado (MatriculaCriada, PagamentoCancelado).

    Attributes:
        event_id: Identificador único do evento
        aggregate_id: ID do agregado que gerou o evento
        occurred_at: Momento em que o evento ocorreu
        version: Versão do schema do evento

    Example:
        @dataclass
        class MatriculaCriadaEvent(DomainEvent):
            aluno_id: str = ""

            @property
            def aggregate_type(self) -> str:
                return "Matricula"
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    occurred_at: datetime = field(default_factory=datetime.now)
    version: int = 1

    def __post_init__(self):
        if not self.aggregate_id:
            raise ValueError("aggregate_id é obrigatório")

    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Nome do agregado (ex: "Matricula", "Pagamento")."""
        ...

    @property
    def event_type(self) -> str:
        """Nome da classe do evento."""
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializa evento para dicionário JSON-safe.

        Returns:
            Dicionário com metadados e ``data`` específico do evento
        """
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        """Campos específicos da subclasse, já serializados."""
        base_fields = {"event_id", "aggregate_id", "occurred_at", "version"}
        return {
            key: serializar_valor(value)
            for key, value in self.__dict__.items()
            if key not in base_fields and not key.startswith("_")
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainEvent":
        """
        Reconstrói evento a partir do formato de ``to_dict``.

        Campos de dados permanecem no formato serializado
        (ex: valores monetários como string).
        """
        return cls(
            event_id=data.get("event_id", str(uuid.uuid4())),
            aggregate_id=data["aggregate_id"],
            occurred_at=datetime.fromisoformat(data["occurred_at"]),
            version=data.get("version", 1),
            **data.get("data", {}),
        )

    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id})"
        )
